from __future__ import annotations

from typing import Sequence

from lambdaserve.handlers.resolver import HandlerRef

_RESOLVE_HANDLER_TS = """\
type LambdaHandler = (event: APIGatewayProxyEvent) => Promise<any> | any;

// A handler module exposes one entry point: a named `handler` export, else a default export.
function resolveHandler(mod: any, source: string): LambdaHandler {
  if (typeof mod?.handler === 'function') return mod.handler;
  if (typeof mod?.default === 'function') return mod.default;
  throw new Error(`${source} exports neither a 'handler' function nor a default function`);
}
"""

_RESOLVE_HANDLER_JS = """\
// A handler module exposes one entry point: a named `handler` export, else a default export.
function resolveHandler(mod, source) {
  if (typeof mod?.handler === 'function') return mod.handler;
  if (typeof mod?.default === 'function') return mod.default;
  throw new Error(`${source} exports neither a 'handler' function nor a default function`);
}
"""

_SEND_RESULT = """\
    let sc = 200;
    if (result && result.statusCode) {
      sc = result.statusCode;
      delete result.statusCode;
    }
    res.status(sc).send(result);
  } catch (error) {
    console.error(error);
    res.status(500).send('Internal Server Error');
  }
});
"""


def _route_block(h: HandlerRef) -> str:
    return (
        f"\napp.post('/{h.route_name}', async (req: Request, res: Response) => {{\n"
        "  const event = {\n"
        "    body: JSON.stringify(req.body),\n"
        "    pathParameters: req.params,\n"
        "    queryStringParameters: req.query,\n"
        "    headers: req.headers,\n"
        "    path: req.path,\n"
        "  } as unknown as APIGatewayProxyEvent;\n"
        "  try {\n"
        f"    const result = await {h.binding_name}(event) as any;\n"
        + _SEND_RESULT
    )


def _listen(port: int) -> str:
    return (
        f"\nconst port = process.env.PORT || {port};\n"
        "app.listen(port, () => {\n"
        "  console.log(`Server running on http://localhost:${port}`);\n"
        "});\n"
    )


def generate_server_code(handlers: Sequence[HandlerRef], port: int = 8080) -> str:
    """TypeScript Express entrypoint with one POST route per handler."""
    parts = [
        "import express, { Express, Request, Response } from 'express';\n",
        "import { APIGatewayProxyEvent } from 'aws-lambda';\n",
        "\n",
        _RESOLVE_HANDLER_TS,
        "\n",
    ]
    parts.extend(h.import_line() for h in handlers)
    parts.append("\nconst app: Express = express();\napp.use(express.json());\n")
    parts.extend(_route_block(h) for h in handlers)
    parts.append(_listen(port))
    return "".join(parts)


def generate_inplace_server_code(
    handler: HandlerRef,
    route_name: str,
    typescript: bool,
    port: int = 8080,
) -> str:
    """Single-route server written next to the handler; the event is the request body."""
    source = handler.import_path
    if typescript:
        parts = [
            "import express, { Express, Request, Response } from 'express';\n",
            "import { APIGatewayProxyEvent } from 'aws-lambda';\n\n",
            _RESOLVE_HANDLER_TS,
            f'\nconst handler = resolveHandler(require("./{source}"), "{source}");\n',
            "\nconst app: Express = express();\napp.use(express.json());\n",
            f"\napp.post('/{route_name}', async (req: Request, res: Response) => {{\n",
            "  const event = { ...req.body } as any;\n",
            "  try {\n",
            "    const result = await handler(event) as any;\n",
        ]
    else:
        parts = [
            "const express = require('express');\n\n",
            _RESOLVE_HANDLER_JS,
            f'\nconst handler = resolveHandler(require("./{source}"), "{source}");\n',
            "\nconst app = express();\napp.use(express.json());\n",
            f"\napp.post('/{route_name}', async (req, res) => {{\n",
            "  const event = { ...req.body };\n",
            "  try {\n",
            "    const result = await handler(event);\n",
        ]
    parts.append(_SEND_RESULT)
    parts.append(_listen(port))
    return "".join(parts)

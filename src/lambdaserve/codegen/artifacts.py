from __future__ import annotations

import json

DOCKERFILE_NAME = "Dockerfile"
DOCKERIGNORE_NAME = ".dockerignore"
TSCONFIG_NAME = "tsconfig.json"


def generate_dockerfile(port: int = 8080, typescript: bool = True) -> str:
    """
    Two-stage build. The builder installs everything (and compiles TypeScript);
    the runtime stage only carries production dependencies.
    """
    lines = [
        "# Stage 1: Build",
        "FROM node:20 AS builder",
        "WORKDIR /usr/src/app",
        "COPY package*.json ./",
        "RUN npm install",
        "COPY . .",
    ]
    if typescript:
        lines.append("RUN npx tsc")

    lines += [
        "",
        "# Stage 2: Run",
        "FROM node:20-slim",
        "WORKDIR /usr/src/app",
    ]
    if typescript:
        lines += [
            "COPY package*.json ./",
            "RUN npm install --omit=dev",
            "COPY --from=builder /usr/src/app/dist ./dist",
        ]
    else:
        lines.append("COPY --from=builder /usr/src/app .")

    lines += [
        f"ARG PORT={port}",
        "ENV PORT=${PORT}",
        "EXPOSE ${PORT}",
        'CMD [ "node", "dist/server.js" ]' if typescript else 'CMD [ "node", "server.js" ]',
    ]
    return "\n".join(lines) + "\n"


def generate_dockerignore() -> str:
    return "\n".join(["**/node_modules", "dist", "npm-debug.log"]) + "\n"


def generate_tsconfig() -> str:
    config = {
        "compilerOptions": {
            "target": "es2016",
            "module": "commonjs",
            "esModuleInterop": True,
            "allowJs": True,
            "rootDir": "./",
            "outDir": "dist",
            "skipLibCheck": True,
        }
    }
    return json.dumps(config, indent=2) + "\n"

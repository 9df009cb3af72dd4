from lambdaserve.handlers.naming import to_camel_case


def test_to_camel_case_mixed_separators():
    assert to_camel_case("foo bar-baz_qux") == "fooBarBazQux"


def test_to_camel_case_edges():
    assert to_camel_case("") == ""
    assert to_camel_case("A") == "a"
    assert to_camel_case("__--  ") == ""


def test_to_camel_case_collapses_runs_and_lowercases_rest():
    assert to_camel_case("Hello   WORLD__again") == "helloWorldAgain"


def test_to_camel_case_digits_pass_through():
    assert to_camel_case("v2 api-3x") == "v2Api3x"

import typer

from esdump.commands.shared.cli_options import CommonOptions


def test_connection_options_contains_expected_keys():
    opts = CommonOptions.connection_options()

    assert set(opts) == {
        "url", "username", "password", "api_key", "insecure", "timeout", "profile_name"
    }
    assert all(isinstance(o, typer.models.OptionInfo) for o in opts.values())


def test_connection_options_read_environment():
    opts = CommonOptions.connection_options()

    assert opts["url"].envvar == "ESDUMP_URL"
    assert opts["username"].envvar == "ESDUMP_USERNAME"
    assert opts["password"].envvar == "ESDUMP_PASSWORD"
    assert opts["api_key"].envvar == "ESDUMP_API_KEY"
    assert opts["insecure"].envvar == "ESDUMP_INSECURE"
    assert opts["timeout"].envvar == "ESDUMP_TIMEOUT"
    assert opts["profile_name"].envvar is None


def test_connection_options_default_to_none():
    # None lets a saved profile fill the value in
    opts = CommonOptions.connection_options()

    assert all(o.default is None for o in opts.values())


def test_secrets_hide_defaults():
    opts = CommonOptions.connection_options()

    assert opts["password"].show_default is False
    assert opts["api_key"].show_default is False


def test_flag_declarations():
    opts = CommonOptions.connection_options()

    assert opts["url"].param_decls == ("--url", "-u")
    assert opts["insecure"].param_decls == ("--insecure/--secure",)
    assert opts["profile_name"].param_decls == ("--profile", "-p")

from quire.utils.global_mode import EnvGlobalModeProvider, is_env_var_truthy


def test_is_env_var_truthy() -> None:
    assert is_env_var_truthy({"X": "1"}, "X")
    assert is_env_var_truthy({"X": "Yes"}, "X")
    assert not is_env_var_truthy({"X": "0"}, "X")
    assert not is_env_var_truthy({"X": ""}, "X")
    assert not is_env_var_truthy({}, "X")


def test_env_global_mode() -> None:
    gm = EnvGlobalModeProvider({"QUIRE_DEBUG": "true", "QUIRE_SITE": "/srv/blog"}, ["quire", "list"])
    assert gm.argv0 == "quire"
    assert gm.is_debug
    assert not gm.is_porcelain
    assert gm.site_root == "/srv/blog"

    gm.is_porcelain = True
    assert gm.is_porcelain


def test_porcelain_guess() -> None:
    assert EnvGlobalModeProvider({}, ["quire", "--porcelain", "list"]).is_porcelain
    # only the first argument counts
    assert not EnvGlobalModeProvider({}, ["quire", "list", "--porcelain"]).is_porcelain

    gm = EnvGlobalModeProvider({}, [])
    assert gm.argv0 == ""
    assert not gm.is_debug
    assert gm.site_root is None

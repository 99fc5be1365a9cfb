import json
import pathlib

from tests.fixtures import IntegrationTestHarness


def test_cli_version(quire_cli_runner: IntegrationTestHarness) -> None:
    for argv in [
        ["--version"],
        ["version"],
    ]:
        result = quire_cli_runner(*argv)
        assert result.exit_code == 0
        assert "quire" in result.stdout
        assert "fatal error" not in result.stderr.lower()


def test_cli_list(quire_cli_runner: IntegrationTestHarness) -> None:
    result = quire_cli_runner("list")

    assert result.exit_code == 0
    assert "hello-world" in result.stdout
    assert "second-post" in result.stdout
    assert "January 1, 2023" in result.stdout
    assert result.stdout.index("second-post") < result.stdout.index("hello-world")


def test_cli_list_porcelain(quire_cli_runner: IntegrationTestHarness) -> None:
    result = quire_cli_runner("--porcelain", "list")

    assert result.exit_code == 0
    entities = [json.loads(line) for line in result.stdout.splitlines()]
    assert [e["ty"] for e in entities] == ["postsummary-v1", "postsummary-v1"]
    assert [e["slug"] for e in entities] == ["second-post", "hello-world"]
    assert entities[1]["title"] == "Hello"
    assert entities[1]["published_at"] == "2023-01-01T00:00:00+00:00"


def test_cli_list_broken(quire_cli_runner: IntegrationTestHarness) -> None:
    quire_cli_runner.add_post("broken.md", "---\ntitle: Broken\ndescription: x\n---\n")
    result = quire_cli_runner("list")

    assert result.exit_code == 1
    assert "fatal error" in result.stderr
    assert "publishedAt" in result.stderr


def test_cli_check(quire_cli_runner: IntegrationTestHarness) -> None:
    result = quire_cli_runner("check")
    assert result.exit_code == 0
    assert "all 2 post(s) are fine" in result.stderr

    quire_cli_runner.add_post("no-date.md", "---\ntitle: T\ndescription: D\n---\nbody\n")
    result = quire_cli_runner("check")
    assert result.exit_code == 1
    assert "no-date" in result.stdout
    assert "1 of 3 post(s) are broken" in result.stderr


def test_cli_check_porcelain(quire_cli_runner: IntegrationTestHarness) -> None:
    quire_cli_runner.add_post("no-date.md", "---\ntitle: T\ndescription: D\n---\nbody\n")
    result = quire_cli_runner("--porcelain", "check")

    assert result.exit_code == 1
    entities = {e["slug"]: e for e in map(json.loads, result.stdout.splitlines())}
    assert entities["hello-world"] == {
        "ty": "postcheckresult-v1",
        "slug": "hello-world",
        "ok": True,
    }
    assert entities["no-date"]["ok"] is False
    assert "publishedAt" in entities["no-date"]["error"]


def test_cli_render(quire_cli_runner: IntegrationTestHarness) -> None:
    result = quire_cli_runner("render", "hello-world")

    assert result.exit_code == 0
    assert result.stdout.startswith("<!DOCTYPE html>")
    assert "<h1>Hi</h1>" in result.stdout
    assert "<em>text</em>" in result.stdout


def test_cli_render_to_file(
    quire_cli_runner: IntegrationTestHarness,
    tmp_path: pathlib.Path,
) -> None:
    out = tmp_path / "out.html"
    result = quire_cli_runner("render", "second-post", "-o", str(out))

    assert result.exit_code == 0
    assert result.stdout == ""
    html = out.read_text(encoding="utf-8")
    assert '<a href="https://example.com/">link</a>' in html
    # highlight_style comes from the site's quire.toml
    assert ".markdown-body .highlight" in html


def test_cli_render_not_found(quire_cli_runner: IntegrationTestHarness) -> None:
    result = quire_cli_runner("render", "nope")
    assert result.exit_code == 1
    assert "no post with slug" in result.stderr


def test_cli_duplicate_slug(quire_cli_runner: IntegrationTestHarness) -> None:
    quire_cli_runner.add_post("dup.md", "---\ntitle: A\ndescription: A\npublishedAt: 2023-01-01\n---\n")
    quire_cli_runner.add_post("DUP.md", "---\ntitle: B\ndescription: B\npublishedAt: 2023-01-01\n---\n")
    result = quire_cli_runner("list")

    assert result.exit_code == 1
    assert "duplicate post slug 'dup'" in result.stderr


def test_cli_config_override(quire_cli_runner: IntegrationTestHarness) -> None:
    result = quire_cli_runner("-c", "posts.dir=elsewhere", "list")
    assert result.exit_code == 0
    assert "hello-world" not in result.stdout

    result = quire_cli_runner("-c", "server.port=eighty", "list")
    assert result.exit_code == 1
    assert "expected an integer" in result.stderr

    result = quire_cli_runner("-c", "nonsense", "list")
    assert result.exit_code == 1


def test_cli_bad_config_file(quire_cli_runner: IntegrationTestHarness) -> None:
    quire_cli_runner.write_config("[server]\nport = 70000\n")
    result = quire_cli_runner("list")

    assert result.exit_code == 1
    assert "server" in result.stderr
    assert "1..65535" in result.stderr


def test_cli_site_option(
    quire_cli_runner: IntegrationTestHarness,
    tmp_path: pathlib.Path,
) -> None:
    other_site = tmp_path / "other-site"
    (other_site / "data" / "posts").mkdir(parents=True)
    (other_site / "data" / "posts" / "elsewhere.md").write_text(
        "---\ntitle: Elsewhere\ndescription: x\npublishedAt: 2024-06-01\n---\nhi\n",
        encoding="utf-8",
    )

    # --site wins over QUIRE_SITE
    result = quire_cli_runner("--porcelain", "--site", str(other_site), "list")
    assert result.exit_code == 0
    assert [json.loads(line)["slug"] for line in result.stdout.splitlines()] == ["elsewhere"]

    empty_site = tmp_path / "empty-site"
    empty_site.mkdir()
    result = quire_cli_runner("--site", str(empty_site), "list")
    assert result.exit_code == 0
    assert "hello-world" not in result.stdout
    assert "(no post under" in result.stdout

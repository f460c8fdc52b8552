from typer.testing import CliRunner

from forkify import cli
from forkify.errors import NetworkError
from forkify.models.recipe_schema import Recipe
from forkify.state import RecipeState

runner = CliRunner()


def _use_state(monkeypatch, fetcher, store):
    state = RecipeState(fetcher, store, api_url="https://api.test/recipes/", api_key="k", results_per_page=2)
    monkeypatch.setattr(cli, "build_state", lambda require_key=True: state)
    return state


def test_search_prints_requested_page(monkeypatch, fetcher, store):
    fetcher.response = {
        "data": {
            "recipes": [
                {"id": f"id-{i}", "title": f"Pasta {i}", "publisher": "P", "image_url": "i"} for i in range(5)
            ]
        }
    }
    state = _use_state(monkeypatch, fetcher, store)

    result = runner.invoke(cli.app, ["search", "pasta", "--page", "2"])

    assert result.exit_code == 0, result.output
    assert "Pasta 2" in result.output
    assert "Pasta 0" not in result.output
    assert state.state.search.page == 2


def test_show_rescales_servings(monkeypatch, fetcher, store):
    fetcher.response = {
        "data": {
            "recipe": {
                "id": "r1",
                "title": "Pancakes",
                "publisher": "P",
                "servings": 2,
                "cooking_time": 10,
                "ingredients": [{"quantity": 1, "unit": "cup", "description": "flour"}],
            }
        }
    }
    _use_state(monkeypatch, fetcher, store)

    result = runner.invoke(cli.app, ["show", "r1", "--servings", "4"])

    assert result.exit_code == 0, result.output
    assert "2 cup flour" in result.output


def test_show_reports_errors(monkeypatch, fetcher, store):
    fetcher.error = NetworkError("Invalid _id (400)", status_code=400)
    _use_state(monkeypatch, fetcher, store)

    result = runner.invoke(cli.app, ["show", "nope"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_bookmark_commands(monkeypatch, fetcher, store):
    fetcher.response = {"data": {"recipe": {"id": "r1", "title": "Pancakes"}}}
    state = _use_state(monkeypatch, fetcher, store)

    assert runner.invoke(cli.app, ["bookmark", "r1"]).exit_code == 0
    assert [b.id for b in state.bookmarks] == ["r1"]

    listing = runner.invoke(cli.app, ["bookmarks"])
    assert "Pancakes" in listing.output

    assert runner.invoke(cli.app, ["unbookmark", "r1"]).exit_code == 0
    assert state.bookmarks == []
    assert store.get("bookmarks") == "[]"


def test_clear_bookmarks_command(monkeypatch, fetcher, store):
    state = _use_state(monkeypatch, fetcher, store)
    state.add_bookmark(Recipe(id="a"))

    result = runner.invoke(cli.app, ["clear-bookmarks"])

    assert result.exit_code == 0
    assert store.get("bookmarks") is None


def test_upload_builds_form_from_options(monkeypatch, fetcher, store):
    fetcher.response = {"data": {"recipe": {"id": "u1", "title": "Mine", "servings": 2, "key": "user-key"}}}
    state = _use_state(monkeypatch, fetcher, store)

    result = runner.invoke(
        cli.app,
        [
            "upload",
            "--title", "Mine",
            "--source-url", "http://x",
            "--image", "i.png",
            "--publisher", "Me",
            "--cooking-time", "20",
            "--servings", "2",
            "--ingredient", "1,kg,Rice",
            "--ingredient", ",,Salt",
        ],
    )

    assert result.exit_code == 0, result.output
    url, body = fetcher.calls[0]
    assert url == "https://api.test/recipes/?key=k"
    assert [ing["description"] for ing in body["ingredients"]] == ["Rice", "Salt"]
    assert state.state.recipe.bookmarked is True


def test_upload_rejects_bad_ingredient(monkeypatch, fetcher, store):
    _use_state(monkeypatch, fetcher, store)

    result = runner.invoke(
        cli.app,
        [
            "upload",
            "--title", "Mine",
            "--source-url", "http://x",
            "--image", "i.png",
            "--publisher", "Me",
            "--cooking-time", "20",
            "--servings", "2",
            "--ingredient", "1,kg",
        ],
    )

    assert result.exit_code == 1
    assert fetcher.calls == []


def test_missing_api_key_is_reported_not_raised(monkeypatch, tmp_path):
    monkeypatch.delenv("FORKIFY_API_KEY", raising=False)
    monkeypatch.setattr(cli.settings, "BOOKMARKS_DB", str(tmp_path / "forkify.db"))

    result = runner.invoke(cli.app, ["search", "pasta"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "FORKIFY_API_KEY" in result.output


def test_local_bookmark_commands_work_without_api_key(monkeypatch, tmp_path):
    monkeypatch.delenv("FORKIFY_API_KEY", raising=False)
    monkeypatch.setattr(cli.settings, "BOOKMARKS_DB", str(tmp_path / "forkify.db"))

    listing = runner.invoke(cli.app, ["bookmarks"])
    assert listing.exit_code == 0, listing.output
    assert "No bookmarks yet" in listing.output

    assert runner.invoke(cli.app, ["unbookmark", "r1"]).exit_code == 0
    assert runner.invoke(cli.app, ["clear-bookmarks"]).exit_code == 0


def test_store_failure_is_reported(monkeypatch, fetcher, store):
    _use_state(monkeypatch, fetcher, store)

    def broken_set(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(store, "set", broken_set)

    result = runner.invoke(cli.app, ["unbookmark", "r1"])

    assert result.exit_code == 1
    assert "disk full" in result.output

from contact_directory.model import Contact, Session, contact_from_dict
from contact_directory.render import CardList, EmptyState, render


def test_render_single_contact():
    c1 = Contact(id="1", name="Alice", address="1 Main St", owner_username="alice")
    view = render((c1,), Session(authenticated=True, username="alice"))
    assert isinstance(view, CardList)
    card = view.cards[0]
    assert card.name == "Alice"
    assert card.owner_badge == "Owner: alice"
    assert card.actions == ("edit", "delete")


def test_render_empty_anonymous():
    view = render((), Session())
    assert isinstance(view, EmptyState)
    assert "Sign in" in view.message


def test_contact_from_dict():
    c = contact_from_dict({
        "id": 42, "name": "Bob", "address": "Elm St", "ownerUsername": "bob",
        "hasPicture": True, "updatedAt": "2024-05-01T10:00:00Z",
        "weather": {"description": "Sunny", "temperatureCelsius": 21.57},
    })
    assert c.id == "42"
    assert c.has_picture is True
    assert c.weather is not None and c.weather.description == "Sunny"


def test_console_projection():
    from rich.console import Console

    from contact_directory.console import ConsoleTarget

    console = Console(record=True, width=100)
    target = ConsoleTarget(console, base_url="http://test")
    c1 = Contact(id="1", name="Alice", address="1 Main St", owner_username="alice",
                 has_picture=True, updated_at="v1")
    view = render((c1,), Session(authenticated=True, username="alice"))
    target.show_loading()
    target.show(view)
    target.hide_loading()
    text = console.export_text()
    assert "Alice" in text
    assert "http://test/api/contacts/1/picture?ts=v1" in text
    assert target.view is view


def test_cli_whoami_offline(tmp_path):
    from typer.testing import CliRunner

    from contact_directory.cli import app

    (tmp_path / "local").mkdir()
    (tmp_path / "local" / "contacts.conf").write_text('base_url = "http://127.0.0.1:9"\ntimeout = 1.0\n')
    result = CliRunner().invoke(app, ["--workspace", str(tmp_path), "whoami"])
    assert result.exit_code == 0
    assert "browsing anonymously" in result.output


def test_view_renderable_per_state():
    from rich.columns import Columns
    from rich.panel import Panel
    from rich.text import Text

    from contact_directory.console import view_renderable
    from contact_directory.render import ErrorState

    c1 = Contact(id="1", name="Alice", address="1 Main St", owner_username="alice")
    assert isinstance(view_renderable(ErrorState()), Panel)
    assert isinstance(view_renderable(render((), Session())), Text)
    assert isinstance(view_renderable(render((c1,), Session())), Columns)


def test_cli_options_ride_on_context(tmp_path, monkeypatch):
    from types import SimpleNamespace

    from contact_directory.cli import CliOptions, _workspace

    (tmp_path / "local").mkdir()
    (tmp_path / "local" / "contacts.conf").write_text('base_url = "http://127.0.0.1:9"\n')
    ctx = SimpleNamespace(obj=CliOptions(base_url="http://override:1/", workspace=tmp_path))
    paths, settings = _workspace(ctx)
    assert paths.root == tmp_path
    assert settings.base_url == "http://override:1"

    monkeypatch.chdir(tmp_path)
    paths, settings = _workspace(SimpleNamespace(obj=None))
    assert paths.root.resolve() == tmp_path.resolve()
    assert settings.base_url == "http://127.0.0.1:9"

import json

from cinemax.extensions import db
from cinemax.models import Movie, User


def test_init_db(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "0 pricing keys added" in result.output


def test_seed_movies_once(app):
    runner = app.test_cli_runner()
    assert "Inserted 2 movies" in runner.invoke(args=["seed-movies"]).output
    assert "already present" in runner.invoke(args=["seed-movies"]).output
    with app.app_context():
        assert db.session.get(Movie, "1").title == "Dune: Part Two"


def test_create_admin_and_promote(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "Boss@Example.com", "pw", "--first-name", "Ada"])
    assert result.exit_code == 0
    with app.app_context():
        user = User.query.filter_by(email="boss@example.com").one()
        assert user.role == "admin" and user.first_name == "Ada"
        user.role = "user"
        db.session.commit()
    result = runner.invoke(args=["create-admin", "boss@example.com", "other"])
    assert "already existed" in result.output
    with app.app_context():
        assert User.query.filter_by(email="boss@example.com").one().role == "admin"


def test_make_admin(app, client, user_token):
    runner = app.test_cli_runner()
    assert runner.invoke(args=["make-admin", "ghost@example.com"]).exit_code != 0
    assert runner.invoke(args=["make-admin", "alice@example.com"]).exit_code == 0
    with app.app_context():
        assert User.query.filter_by(email="alice@example.com").one().is_admin


def test_import_movies(app, tmp_path):
    path = tmp_path / "movies.json"
    path.write_text(json.dumps([{"id": "5", "title": "Imported", "genre": ["Drama"]}, {"title": "No id"}]))
    result = app.test_cli_runner().invoke(args=["import-movies", str(path)])
    assert "Imported 1 movies" in result.output
    with app.app_context():
        assert db.session.get(Movie, "5").genre == ["Drama"]


def test_fetch_movies_without_credentials(app):
    app.config["TMDB_API_KEY"] = None
    app.config["TMDB_ACCESS_TOKEN"] = None
    result = app.test_cli_runner().invoke(args=["fetch-movies"])
    assert result.exit_code != 0
    assert "TMDB credentials are not configured" in result.output

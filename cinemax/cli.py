import json

import click
from flask.cli import with_appcontext

from .auth import hash_password, normalize_email
from .errors import CinemaxError
from .extensions import db
from .models import Movie, User
from .movies import save_movies
from .pricing import seed_pricing
from .tmdb import fetch_and_store_movies

SAMPLE_MOVIES = [
    {
        "id": "1",
        "title": "Dune: Part Two",
        "poster": "https://image.tmdb.org/t/p/w500/8b8R8l88Qje9dn9OE8PY05Nxl1X.jpg",
        "backdrop": "https://image.tmdb.org/t/p/original/xOMo8BRK7PfcJv9JCnx7s5hj0PX.jpg",
        "synopsis": "Paul Atreides unites with Chani and the Fremen while seeking revenge "
                    "against the conspirators who destroyed his family.",
        "duration": 166,
        "rating": 8.8,
        "genre": ["Sci-Fi", "Adventure", "Drama"],
        "releaseDate": "2024-03-01",
        "director": "Denis Villeneuve",
        "cast": ["Timothée Chalamet", "Zendaya", "Rebecca Ferguson", "Josh Brolin"],
        "isNowShowing": True,
        "isComingSoon": False,
        "isFeatured": True,
    },
    {
        "id": "2",
        "title": "Oppenheimer",
        "synopsis": "The story of J. Robert Oppenheimer and the making of the atomic bomb.",
        "duration": 180,
        "rating": 8.4,
        "genre": ["Drama", "History"],
        "releaseDate": "2023-07-21",
        "director": "Christopher Nolan",
        "cast": ["Cillian Murphy", "Emily Blunt", "Matt Damon", "Robert Downey Jr."],
        "isNowShowing": True,
        "isComingSoon": False,
        "isFeatured": False,
    },
]


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create tables and seed the default pricing."""
    db.create_all()
    added = seed_pricing()
    click.echo(f"Database ready ({added} pricing keys added).")


@click.command("seed-movies")
@with_appcontext
def seed_movies_command():
    """Insert the sample catalog when no movies are stored."""
    if Movie.query.first():
        click.echo("Movies already present, nothing to do.")
        return
    click.echo(f"Inserted {save_movies(SAMPLE_MOVIES)} movies.")


@click.command("create-admin")
@click.argument("email")
@click.argument("password")
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
@with_appcontext
def create_admin_command(email, password, first_name, last_name):
    """Create an admin account, or promote the user if the email exists."""
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()
    if user:
        user.role = "admin"
        db.session.commit()
        click.echo(f"User {email} (ID: {user.id}) already existed and has been set as admin.")
        return
    user = User(email=email, password_hash=hash_password(password), first_name=first_name,
                last_name=last_name, role="admin")
    db.session.add(user)
    db.session.commit()
    click.echo(f"Admin user {email} created (ID: {user.id}).")


@click.command("make-admin")
@click.argument("email")
@with_appcontext
def make_admin_command(email):
    """Promote an existing user to admin."""
    user = User.query.filter_by(email=normalize_email(email)).first()
    if not user:
        raise click.ClickException(f"User with email {email} not found. Use create-admin instead.")
    user.role = "admin"
    db.session.commit()
    click.echo(f"User {user.email} (ID: {user.id}) has been set as admin.")


@click.command("fetch-movies")
@click.option("--append", is_flag=True, help="Keep stored movies and add new ones.")
@with_appcontext
def fetch_movies_command(append):
    """Import the catalog from TMDB."""
    try:
        results = fetch_and_store_movies(append=append)
    except CinemaxError as e:
        raise click.ClickException(e.message)
    click.echo(f"Fetched {results['success']} movies ({results['failed']} failed).")


@click.command("import-movies")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--replace", is_flag=True, help="Clear the catalog before importing.")
@with_appcontext
def import_movies_command(path, replace):
    """Load a JSON list of movies in catalog shape."""
    with open(path, encoding="utf-8") as fh:
        movies = json.load(fh)
    if not isinstance(movies, list):
        raise click.ClickException("Expected a JSON list of movies")
    click.echo(f"Imported {save_movies(movies, append=not replace)} movies.")


def register_commands(app):
    for command in (init_db_command, seed_movies_command, create_admin_command, make_admin_command,
                    fetch_movies_command, import_movies_command):
        app.cli.add_command(command)

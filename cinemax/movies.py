from datetime import date

from flask import current_app

from .errors import ConflictError, NotFoundError, ValidationError
from .extensions import db
from .models import Movie

# JSON field -> column, for the fields an admin may set
MOVIE_FIELDS = {
    "title": "title",
    "poster": "poster",
    "backdrop": "backdrop",
    "synopsis": "synopsis",
    "duration": "duration",
    "rating": "rating",
    "genre": "genre",
    "releaseDate": "release_date",
    "director": "director",
    "cast": "cast",
    "trailerUrl": "trailer_url",
    "imdbId": "imdb_id",
    "isNowShowing": "is_now_showing",
    "isComingSoon": "is_coming_soon",
    "isFeatured": "is_featured",
}

FLAG_FILTERS = {
    "isNowShowing": Movie.is_now_showing,
    "isComingSoon": Movie.is_coming_soon,
    "isFeatured": Movie.is_featured,
}


def get_all_movies():
    return Movie.query.order_by(Movie.created_at, Movie.id).all()


def get_movies_by_filter(**flags):
    query = Movie.query
    for name, value in flags.items():
        if value is None:
            continue
        if name not in FLAG_FILTERS:
            raise ValidationError(f"Unknown filter: {name}")
        query = query.filter(FLAG_FILTERS[name] == bool(value))
    return query.order_by(Movie.rating.desc(), Movie.id).all()


def get_popular_movies(min_rating=8.0, limit=10):
    return Movie.query.filter(Movie.rating >= min_rating).order_by(Movie.rating.desc()).limit(limit).all()


def get_movie_by_id(movie_id):
    return db.session.get(Movie, str(movie_id))


def _apply(movie, data):
    for key, attr in MOVIE_FIELDS.items():
        if key in data:
            value = data[key]
            if attr in ("genre", "cast") and not isinstance(value, list):
                raise ValidationError(f"{key} must be a list")
            setattr(movie, attr, value)


def create_movie(data):
    if not data.get("id") or not data.get("title"):
        raise ValidationError("Title and ID are required")
    movie_id = str(data["id"])
    if get_movie_by_id(movie_id):
        raise ConflictError("Movie with this ID already exists")

    movie = Movie(
        id=movie_id,
        synopsis="No synopsis available.",
        duration=120,
        rating=0,
        genre=[],
        cast=[],
        director="Unknown",
        release_date=date.today().isoformat(),
    )
    _apply(movie, {k: v for k, v in data.items() if v is not None})
    db.session.add(movie)
    db.session.commit()
    current_app.logger.info("Movie %s (%s) created", movie.id, movie.title)
    return movie


def update_movie(movie_id, data):
    movie = get_movie_by_id(movie_id)
    if not movie:
        raise NotFoundError("Movie not found")
    _apply(movie, {k: v for k, v in data.items() if k != "id"})
    if not movie.title:
        raise ValidationError("Title is required")
    db.session.commit()
    return movie


def delete_movie(movie_id):
    movie = get_movie_by_id(movie_id)
    if not movie:
        raise NotFoundError("Movie not found")
    db.session.delete(movie)
    db.session.commit()
    current_app.logger.info("Movie %s deleted", movie_id)


def save_movies(movies, append=True):
    """Store catalog dicts. Append keeps existing rows and skips known ids."""
    if not append:
        Movie.query.delete()
    existing = {m for (m,) in db.session.query(Movie.id).all()} if append else set()
    added = 0
    for data in movies:
        movie_id = str(data.get("id", ""))
        if not movie_id or not data.get("title") or movie_id in existing:
            continue
        movie = Movie(id=movie_id)
        _apply(movie, {k: v for k, v in data.items() if k in MOVIE_FIELDS and v is not None})
        db.session.add(movie)
        existing.add(movie_id)
        added += 1
    db.session.commit()
    return added

# Overview: Blinker signals emitted after writes so cached views can be refreshed.

from flask.signals import Namespace

_signals = Namespace()

# sender: the Flask app; kwargs: paths=list[str] of view paths whose data changed
views_invalidated = _signals.signal("views-invalidated")


def invalidate_views(app, *paths: str) -> None:
    views_invalidated.send(app, paths=list(paths))

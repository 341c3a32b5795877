"""PadelHub — padel training tracker backend.

Players log goals, shot ratings, sessions, nutrition, wellbeing and
strength work. Coaches link players, read their data and leave feedback.
Every request is authorized by the access-scoping authority in
padelhub.auth.authority before it touches the database.
"""

__version__ = "0.1.0"

"""Bookshelf — personal book and movie catalog API.

Users register, log in for a JWT, and keep their own collections of
books and movies. Each record gets a number that only means something
inside its owner's collection (your 1st book, your 2nd movie, ...).
"""

__version__ = "0.1.0"

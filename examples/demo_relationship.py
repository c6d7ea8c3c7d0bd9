#!/usr/bin/env python3
"""
  This demo application demonstrates the routes generated by crudrouter
  When crudrouter is installed, you can run this app:
  $ python3 demo_relationship.py [Listener-IP]

  This will run the example on http://Listener-Ip:5000

  - An sqlite database is created and populated
  - CRUD routes are created for users, books and tags:

    /api/user, /api/user/<user_id>/book, /api/book/<book_id>/user, /api/book/<book_id>/tag, ...

"""
import sys
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from crudrouter import CrudApi, Except, Operation

db = SQLAlchemy()

book_tag = db.Table(
    "book_tag",
    db.Column("book_id", db.Integer, db.ForeignKey("Books.id"), primary_key=True),
    db.Column("tag_id", db.Integer, db.ForeignKey("Tags.id"), primary_key=True),
)


# Example sqla database objects
class User(db.Model):
    __tablename__ = "Users"
    # the password is never returned to the client
    exclude_attrs = ("password",)
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, default="")
    email = db.Column(db.String, default="")
    password = db.Column(db.String, default="")
    books = db.relationship("Book", back_populates="user", lazy="dynamic")


class Book(db.Model):
    __tablename__ = "Books"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, default="")
    user_id = db.Column(db.Integer, db.ForeignKey("Users.id"))
    user = db.relationship("User", back_populates="books")
    tags = db.relationship("Tag", secondary=book_tag)


class Tag(db.Model):
    __tablename__ = "Tags"
    id = db.Column(db.Integer, primary_key=True)
    label = db.Column(db.String, nullable=False)


def configure_books(books):
    books.with_parent("user")
    books.with_siblings("tags")


# Create the api endpoints
def create_api(app, host="localhost", port=5000, api_prefix="/api"):
    api = CrudApi(app, prefix=api_prefix)
    api.crud(User).with_children("books", methods=Except(Operation.DELETE))
    api.crud(Book, configure=configure_books)
    api.crud(Tag)
    for verb, rule, endpoint in api.route_table:
        print(f"{verb:7} http://{host}:{port}{rule}")
    return api


def create_app(config_filename=None, host="localhost"):
    app = Flask("demo_app")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://")
    db.init_app(app)

    with app.app_context():
        db.create_all()
        # Populate the db with users and books and add the books to the user.books relationship
        for i in range(20):
            user = User(name=f"user{i}", email=f"email{i}@email.com")
            book = Book(name=f"test book {i}")
            user.books.append(book)
            db.session.add(user)
        db.session.commit()

    create_api(app, host)
    return app


# Address where the api will be hosted, change this if you're not running the app on localhost!
host = sys.argv[1] if sys.argv[1:] else "127.0.0.1"
app = create_app(host=host)

if __name__ == "__main__":
    app.run(host=host)

"""CRUD operations for book records using FastCRUD."""

from fastcrud import FastCRUD

from .models import Book

book_crud: FastCRUD = FastCRUD(Book)

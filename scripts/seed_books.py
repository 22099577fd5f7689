"""Script to replace the catalog contents with a demo set of books.

Every existing book is deleted first, so only run this against a
development database.
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete  # noqa: E402

from bookcatalog.infrastructure.database.session import create_tables, local_session  # noqa: E402
from bookcatalog.infrastructure.logging import get_logger  # noqa: E402
from bookcatalog.modules.book.models import Book  # noqa: E402
from bookcatalog.modules.book.schemas import BookCreate  # noqa: E402
from bookcatalog.modules.book.services import BookService  # noqa: E402

logger = get_logger(__name__)

DEMO_BOOKS = [
    ("To Kill a Mockingbird", "Harper Lee", "Fiction", 1960, "Available"),
    ("1984", "George Orwell", "Dystopian", 1949, "Issued"),
    ("Pride and Prejudice", "Jane Austen", "Romance", 1813, "Available"),
    ("The Great Gatsby", "F. Scott Fitzgerald", "Fiction", 1925, "Available"),
    ("Moby-Dick", "Herman Melville", "Adventure", 1851, "Issued"),
    ("War and Peace", "Leo Tolstoy", "Historical", 1869, "Available"),
    ("The Catcher in the Rye", "J. D. Salinger", "Fiction", 1951, "Available"),
    ("Brave New World", "Aldous Huxley", "Dystopian", 1932, "Available"),
    ("The Hobbit", "J. R. R. Tolkien", "Fantasy", 1937, "Issued"),
    ("Fahrenheit 451", "Ray Bradbury", "Dystopian", 1953, "Available"),
    ("Jane Eyre", "Charlotte Bronte", "Romance", 1847, "Available"),
    ("Wuthering Heights", "Emily Bronte", "Romance", 1847, "Issued"),
    ("Crime and Punishment", "Fyodor Dostoevsky", "Classic", 1866, "Available"),
    ("The Odyssey", "Homer", "Classic", 1614, "Available"),
    ("Don Quixote", "Miguel de Cervantes", "Classic", 1605, "Issued"),
    ("Dune", "Frank Herbert", "Science Fiction", 1965, "Available"),
    ("Foundation", "Isaac Asimov", "Science Fiction", 1951, "Available"),
    ("Neuromancer", "William Gibson", "Science Fiction", 1984, "Issued"),
    ("The Name of the Wind", "Patrick Rothfuss", "Fantasy", 2007, "Available"),
    ("A Game of Thrones", "George R. R. Martin", "Fantasy", 1996, "Available"),
    ("The Road", "Cormac McCarthy", "Post-apocalyptic", 2006, "Available"),
    ("Sapiens", "Yuval Noah Harari", "History", 2011, "Issued"),
    ("A Brief History of Time", "Stephen Hawking", "Science", 1988, "Available"),
    ("The Selfish Gene", "Richard Dawkins", "Science", 1976, "Available"),
    ("Gone Girl", "Gillian Flynn", "Thriller", 2012, "Available"),
    ("The Girl with the Dragon Tattoo", "Stieg Larsson", "Thriller", 2005, "Issued"),
]


async def main() -> None:
    """Delete every book and insert the demo set."""
    await create_tables()
    book_service = BookService()

    try:
        async with local_session() as db:
            await db.execute(delete(Book))
            await db.commit()

            for title, author, genre, year, status in DEMO_BOOKS:
                book = BookCreate(title=title, author=author, genre=genre, year=year, status=status)
                await book_service.create_book(book, db)
    except Exception as e:
        logger.error(f"❌ Error seeding books: {str(e)}", exc_info=True)
        sys.exit(1)

    logger.info(f"✅ Inserted {len(DEMO_BOOKS)} demo books successfully!")


if __name__ == "__main__":
    asyncio.run(main())

"""
API endpoints for catalog browsing, editing and guarded deletion.

This module handles HTTP concerns and delegates to domain services.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from locallibrary.domain.exceptions import LibraryError
from locallibrary.domain.ports import EntityKind
from locallibrary.domain.services import (
    AggregationService,
    CatalogService,
    DeletionGuard,
)
from locallibrary.domain.value_objects import DeletionStatus
from locallibrary.api.v1 import schemas as api
from locallibrary.api.v1.converters import (
    api_book_form_to_domain,
    domain_author_to_api,
    domain_book_summary_to_api,
    domain_book_to_api,
    domain_deletion_to_api,
    domain_form_options_to_api,
    domain_genre_to_api,
    domain_page_to_api,
    domain_summary_to_api,
)
from locallibrary.api.v1.dependencies import (
    ServiceContainer,
    get_aggregation_service,
    get_catalog_service,
    get_container,
    get_deletion_guard,
)
from locallibrary.api.v1.errors import to_http_error

router = APIRouter()

BOOK_LIST_URL = "/catalog/books"


@router.get("/summary", response_model=api.CatalogSummary)
async def get_summary(
    service: AggregationService = Depends(get_aggregation_service),
) -> api.CatalogSummary:
    """
    Dashboard counts: books, copies, available copies, authors, genres.

    The five counts are computed concurrently; if any of them fails the
    whole request fails.
    """
    try:
        summary = await service.summarize()
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_summary_to_api(summary)


@router.get("/books", response_model=list[api.BookSummary])
async def list_books(
    service: CatalogService = Depends(get_catalog_service),
) -> list[api.BookSummary]:
    """List books with title, author and price."""
    try:
        books = await service.list_books()
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return [domain_book_summary_to_api(book) for book in books]


@router.post("/books", response_model=api.Book, status_code=status.HTTP_201_CREATED)
async def create_book(
    form: api.BookForm,
    service: CatalogService = Depends(get_catalog_service),
) -> api.Book:
    """
    Create a book from form fields.

    Raises:
        422: One entry per failing validation rule
    """
    try:
        book = await service.create_book(api_book_form_to_domain(form))
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_book_to_api(book)


@router.get("/book-form", response_model=api.BookFormOptions)
async def get_book_form_options(
    service: CatalogService = Depends(get_catalog_service),
) -> api.BookFormOptions:
    """Authors and genres to choose from when creating or editing a book."""
    try:
        options = await service.get_book_form_options()
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_form_options_to_api(options)


@router.get("/books/{book_id}", response_model=api.BookPage)
async def get_book(
    book_id: UUID,
    service: CatalogService = Depends(get_catalog_service),
) -> api.BookPage:
    """
    Get a book (author and genres resolved) together with its copies.

    Raises:
        404: Book not found
    """
    try:
        page = await service.get_book_detail(book_id)
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_page_to_api(page)


@router.put("/books/{book_id}", response_model=api.Book)
async def update_book(
    book_id: UUID,
    form: api.BookForm,
    service: CatalogService = Depends(get_catalog_service),
) -> api.Book:
    """Replace every field of a book, keeping its id."""
    try:
        book = await service.update_book(book_id, api_book_form_to_domain(form))
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_book_to_api(book)


@router.get("/books/{book_id}/delete", response_model=api.DeletionResponse)
async def preview_book_deletion(
    book_id: UUID,
    guard: DeletionGuard = Depends(get_deletion_guard),
) -> api.DeletionResponse:
    """Show the book and the copies that would block its deletion."""
    try:
        result = await guard.preview_book_deletion(book_id)
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)

    if result.status is DeletionStatus.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id '{book_id}' not found",
        )
    return domain_deletion_to_api(result)


@router.post("/books/{book_id}/delete", response_model=api.DeletionResponse)
async def delete_book(
    book_id: UUID,
    guard: DeletionGuard = Depends(get_deletion_guard),
) -> api.DeletionResponse:
    """
    Delete a book unless copies still reference it.

    A blocked deletion is a normal 200 response listing the dependents;
    a successful one carries the book list URL to redirect to.
    """
    try:
        result = await guard.delete_book(book_id)
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)

    if result.status is DeletionStatus.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id '{book_id}' not found",
        )
    if result.status is DeletionStatus.DELETED:
        return domain_deletion_to_api(result, redirect_url=BOOK_LIST_URL)
    return domain_deletion_to_api(result)


@router.get("/authors", response_model=list[api.Author])
async def list_authors(
    service: CatalogService = Depends(get_catalog_service),
) -> list[api.Author]:
    try:
        authors = await service.list_authors()
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return [domain_author_to_api(author) for author in authors]


@router.get("/genres", response_model=list[api.Genre])
async def list_genres(
    service: CatalogService = Depends(get_catalog_service),
) -> list[api.Genre]:
    try:
        genres = await service.list_genres()
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return [domain_genre_to_api(genre) for genre in genres]


@router.put("/genres/{genre_id}", response_model=api.Genre)
async def update_genre(
    genre_id: UUID,
    form: api.GenreForm,
    service: CatalogService = Depends(get_catalog_service),
) -> api.Genre:
    """Rename a genre; the id never changes."""
    try:
        genre = await service.update_genre(genre_id, form.name)
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_genre_to_api(genre)


@router.get("/health")
def health_check(container: ServiceContainer = Depends(get_container)) -> dict:
    """
    Check that the catalog store answers and whether checkout is enabled.
    """
    try:
        container.store.count(EntityKind.BOOK)
        store_ready = True
    except LibraryError:
        store_ready = False

    checkout_ready = container.checkout_service is not None

    return {
        "status": "ok" if store_ready and checkout_ready else "degraded",
        "components": {
            "catalog_store": store_ready,
            "payment_gateway": checkout_ready,
        },
        "overall": store_ready and checkout_ready,
    }

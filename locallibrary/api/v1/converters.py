"""
Converters between domain entities/value objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from typing import Iterable, List, Optional

from locallibrary.domain import entities as domain
from locallibrary.domain import value_objects as domain_vo
from locallibrary.domain.validation import ValidationIssue
from locallibrary.api.v1 import schemas as api


def domain_author_to_api(author: domain.Author) -> api.Author:
    return api.Author(
        id=author.id,
        first_name=author.first_name,
        family_name=author.family_name,
        name=author.name,
        lifespan=author.lifespan,
        date_of_birth=author.date_of_birth,
        date_of_death=author.date_of_death,
        url=author.url,
    )


def domain_genre_to_api(genre: domain.Genre) -> api.Genre:
    return api.Genre(id=genre.id, name=genre.name, url=genre.url)


def domain_instance_to_api(instance: domain.BookInstance) -> api.BookInstance:
    return api.BookInstance(
        id=instance.id,
        book_id=instance.book_id,
        imprint=instance.imprint,
        status=instance.status.value,
        due_back=instance.due_back,
        url=instance.url,
    )


def domain_instances_to_api(instances: Iterable[domain.BookInstance]) -> List[api.BookInstance]:
    return [domain_instance_to_api(instance) for instance in instances]


def domain_book_to_api(
    book: domain.Book,
    author: Optional[domain.Author] = None,
    genres: Iterable[domain.Genre] = (),
) -> api.Book:
    """
    Convert a domain Book (plus its resolved references) to an API Book.

    Args:
        book: Domain Book entity
        author: Resolved author, if any
        genres: Resolved genres

    Returns:
        API Book model
    """
    return api.Book(
        id=book.id,
        title=book.title,
        summary=book.summary,
        isbn=book.isbn,
        price=book.price,
        author=domain_author_to_api(author) if author else None,
        genres=[domain_genre_to_api(genre) for genre in genres],
        url=book.url,
    )


def domain_detail_to_api(detail: domain_vo.BookDetail) -> api.Book:
    return domain_book_to_api(detail.book, detail.author, detail.genres)


def domain_page_to_api(page: domain_vo.BookPage) -> api.BookPage:
    return api.BookPage(
        book=domain_detail_to_api(page.detail),
        instances=domain_instances_to_api(page.instances),
    )


def domain_summary_to_api(summary: domain_vo.CatalogSummary) -> api.CatalogSummary:
    return api.CatalogSummary(
        book_count=summary.book_count,
        book_instance_count=summary.book_instance_count,
        available_instance_count=summary.available_instance_count,
        author_count=summary.author_count,
        genre_count=summary.genre_count,
    )


def domain_book_summary_to_api(summary: domain_vo.BookSummary) -> api.BookSummary:
    return api.BookSummary(
        id=summary.id,
        title=summary.title,
        author_name=summary.author_name,
        price=summary.price,
        url=summary.url,
    )


def domain_form_options_to_api(options: domain_vo.BookFormOptions) -> api.BookFormOptions:
    return api.BookFormOptions(
        authors=[domain_author_to_api(author) for author in options.authors],
        genres=[domain_genre_to_api(genre) for genre in options.genres],
    )


def domain_deletion_to_api(
    result: domain_vo.DeletionResult,
    redirect_url: Optional[str] = None,
) -> api.DeletionResponse:
    return api.DeletionResponse(
        status=result.status.value,
        book=domain_book_to_api(result.book) if result.book else None,
        dependents=domain_instances_to_api(result.dependents),
        redirect_url=redirect_url,
    )


def domain_checkout_to_api(bundle: domain_vo.CheckoutBundle) -> api.CheckoutResponse:
    return api.CheckoutResponse(
        book=domain_detail_to_api(bundle.detail),
        instances=domain_instances_to_api(bundle.instances),
        client_token=bundle.client_token,
    )


def api_book_form_to_domain(form: api.BookForm) -> domain_vo.BookDraft:
    """Convert the create/update body into a BookDraft; a scalar genre becomes a 1-tuple."""
    if form.genre is None:
        genre = ()
    elif isinstance(form.genre, str):
        genre = (form.genre,)
    else:
        genre = tuple(form.genre)

    return domain_vo.BookDraft(
        title=form.title,
        author=form.author,
        summary=form.summary,
        isbn=form.isbn,
        price=form.price,
        genre=genre,
    )


def api_payment_form_to_domain(form: api.PaymentForm) -> domain_vo.PaymentRequest:
    return domain_vo.PaymentRequest(
        amount=form.amount,
        nonce=form.payment_method_nonce,
        customer=domain_vo.CustomerIdentity(
            first_name=form.first_name,
            last_name=form.last_name,
            email=form.email,
        ),
    )


def issues_to_api(issues: Iterable[ValidationIssue]) -> List[dict]:
    return [
        api.ValidationIssue(field=issue.field, message=issue.message).model_dump()
        for issue in issues
    ]

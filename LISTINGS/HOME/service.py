# file: LISTINGS/HOME/service.py
import logging
from typing import List, Mapping, Optional

from pydantic import ValidationError

from LISTINGS.core.errors import FieldError, ListingValidationError
from LISTINGS.core.store import ListingStore
from LISTINGS.HOME import validator
from LISTINGS.HOME.models import Category, Listing
from LISTINGS.HOME.search import build_predicate

logger = logging.getLogger("home.service")


class ListingService:
    """
    Search and create listings for the food, house and market categories.

    Holds no listing state of its own; every call reads from or writes to
    the injected store.
    """

    def __init__(self, store: ListingStore):
        self.store = store

    def search(self, category: Category, query: Optional[str] = "") -> List[Listing]:
        category = Category(category)
        predicate = build_predicate(query or "")
        docs = self.store.find(category.value, predicate)
        logger.debug("search %s query=%r -> %d match(es)", category.value, query, len(docs))
        listings = []
        for doc in docs:
            try:
                listings.append(Listing(**{**doc, "category": category}))
            except ValidationError as e:
                logger.warning(
                    "Skipping unreadable %s document %s: %d invalid field(s)",
                    category.value,
                    doc.get("id"),
                    e.error_count(),
                )
        return listings

    def validate(self, category: Category, fields: Mapping[str, Optional[str]]) -> List[FieldError]:
        return validator.validate(Category(category), fields)

    def create(
        self,
        category: Category,
        fields: Mapping[str, Optional[str]],
        image_path: Optional[str] = None,
    ) -> Listing:
        """
        Validate the submitted fields and store one new listing.

        Raises ListingValidationError with every failing field when the
        submission is rejected; nothing is written in that case.
        """
        category = Category(category)
        errors = self.validate(category, fields)
        if errors:
            raise ListingValidationError(errors)

        listing = Listing(
            category=category,
            title=fields["title"],
            image=image_path or "",
            location=fields["location"],
            rent=float(fields["rent"]) if category == Category.house else None,
            price=float(fields["price"]) if category == Category.market else None,
            latitude=fields["latitude"],
            longitude=fields["longitude"],
            description=fields["description"],
        )
        stored = self.store.insert(category.value, listing.to_document())
        logger.info("Created %s listing %s", category.value, stored["id"])
        return Listing(category=category, **stored)

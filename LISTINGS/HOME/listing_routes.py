# file: LISTINGS/HOME/listing_routes.py
import asyncio
import logging
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.datastructures import UploadFile

from LISTINGS.core.config import CREATE_RATE_LIMIT, DEFAULT_CATEGORY, PLACEHOLDER_IMAGES
from LISTINGS.core.errors import FieldError, ListingValidationError, StoreError
from LISTINGS.core.rate_limit import limiter
from LISTINGS.HOME.models import Category, FormPage, LandingPage, SearchPage
from LISTINGS.HOME.service import ListingService
from LISTINGS.HOME.validator import form_fields
from LISTINGS.media.upload import discard_upload, has_file, is_image, save_upload

logger = logging.getLogger("home.listings")
router = APIRouter(tags=["listings"])

IMAGE_FIELD = "image"


# ---------------------------
# Helpers
# ---------------------------
def get_service(request: Request) -> ListingService:
    return request.app.state.listing_service


def resolve_category(category: str) -> Category:
    try:
        return Category(category)
    except ValueError:
        raise HTTPException(status_code=404, detail="Not Found")


def form_page(category: Category, errors=None) -> FormPage:
    return FormPage(
        routeName=category,
        fields=form_fields(category) + [IMAGE_FIELD],
        errors=errors or [],
    )


def rejected(category: Category, errors) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=form_page(category, errors).model_dump(mode="json"),
    )


async def read_submission(request: Request) -> Tuple[Dict[str, str], Optional[UploadFile]]:
    """
    Pull listing fields (and the optional image) out of a form, multipart
    or JSON body.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Expected a JSON object")
        return {k: str(v) for k, v in payload.items() if v is not None}, None

    form = await request.form()
    fields = {k: v for k, v in form.items() if isinstance(v, str)}
    image = form.get(IMAGE_FIELD)
    return fields, image if isinstance(image, UploadFile) else None


# ---------------------------
# Landing page
# ---------------------------
@router.get("/", response_model=LandingPage)
async def landing(
    selected_type: Optional[str] = Query(None, alias="type"),
    query: Optional[str] = Query(None),
):
    return LandingPage(
        searchAction=f"/{DEFAULT_CATEGORY}",
        selectedType=selected_type or DEFAULT_CATEGORY,
        query=query or "",
        categories=list(Category),
    )


# ---------------------------
# Blank create form
# ---------------------------
@router.get("/{category}/form", response_model=FormPage)
async def listing_form(category: str):
    return form_page(resolve_category(category))


# ---------------------------
# Search listings
# ---------------------------
@router.get("/{category}", response_model=SearchPage)
async def search_listings(
    category: str,
    request: Request,
    query: str = Query(""),
    service: ListingService = Depends(get_service),
):
    cat = resolve_category(category)
    try:
        cards = await asyncio.to_thread(service.search, cat, query)
    except StoreError:
        logger.exception("❌ Error fetching %s listings", cat.value)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return SearchPage(
        cards=cards,
        query=query,
        selectedType=cat,
        searchAction=f"/{cat.value}",
        imagepath=PLACEHOLDER_IMAGES[cat.value],
        domain=request.headers.get("host"),
    )


# ---------------------------
# Create listing
# ---------------------------
@router.post("/{category}")
@limiter.limit(CREATE_RATE_LIMIT)
async def create_listing(
    category: str,
    request: Request,
    service: ListingService = Depends(get_service),
):
    """
    Accept a listing submission with an optional image file.
    - 303 redirect back to the category search on success.
    - 400 with every field error when the submission is rejected.
    """
    cat = resolve_category(category)
    fields, image = await read_submission(request)
    upload_dir = request.app.state.upload_dir

    if has_file(image) and not is_image(image):
        errors = service.validate(cat, fields)
        errors.append(FieldError(
            field=IMAGE_FIELD,
            message="Only image files are allowed",
            value=image.filename,
        ))
        return rejected(cat, errors)

    image_path = await save_upload(image, upload_dir) if has_file(image) else None

    try:
        listing = await asyncio.to_thread(service.create, cat, fields, image_path)
    except ListingValidationError as e:
        if image_path:
            discard_upload(image_path, upload_dir)
        return rejected(cat, e.errors)
    except StoreError:
        if image_path:
            discard_upload(image_path, upload_dir)
        logger.exception("❌ Error saving %s listing", cat.value)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    logger.info("✅ %s listing %s created", cat.value, listing.id)
    return RedirectResponse(url=f"/{cat.value}", status_code=303)

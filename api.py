"""HTTP routes for item records and the batch processing trigger."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, field_validator

from items import Item, ItemService, JobFetchError

router = APIRouter(prefix="/api/items")


class ItemIn(BaseModel):
    """Body accepted when creating an item."""

    name: str
    description: Optional[str] = None
    status: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value


class ItemPatch(BaseModel):
    """Body accepted when updating; only non-null fields are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    email: Optional[EmailStr] = None


class ItemOut(BaseModel):
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None


def get_service(request: Request) -> ItemService:
    return request.app.state.item_service


@router.get("", response_model=List[ItemOut])
def list_items(service: ItemService = Depends(get_service)):
    return [item.to_dict() for item in service.find_all()]


@router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(body: ItemIn, service: ItemService = Depends(get_service)):
    saved = service.save(Item(**body.model_dump()))
    return saved.to_dict()


@router.get("/process", response_model=List[ItemOut])
def process_items(service: ItemService = Depends(get_service)):
    try:
        processed = service.process_items_async().result()
    except JobFetchError as exc:
        logging.error("Item processing failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return [item.to_dict() for item in processed]


@router.get("/process/count")
def processed_count(service: ItemService = Depends(get_service)):
    return {"processed_count": service.processed_count}


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: int, service: ItemService = Depends(get_service)):
    item = service.find_by_id(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item.to_dict()


@router.put("/{item_id}", response_model=ItemOut)
def update_item(item_id: int, body: ItemPatch, service: ItemService = Depends(get_service)):
    item = service.find_by_id(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    for field, value in body.model_dump(exclude_none=True).items():
        setattr(item, field, value)
    updated = service.update(item)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return updated.to_dict()


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: int, service: ItemService = Depends(get_service)):
    if not service.exists_by_id(item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    service.delete_by_id(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report invalid input as a list of ``"<field> Error"`` strings."""
    errors = [f"{err['loc'][-1]} Error" for err in exc.errors()]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)


def create_app(service: ItemService) -> FastAPI:
    app = FastAPI(title="Item Service")
    app.state.item_service = service
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)
    return app

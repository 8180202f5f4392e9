"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from school_directory.services.image_store import ImageStore, get_image_store
from school_directory.services.school_gateway import SchoolGateway, get_school_gateway

GatewayDep = Annotated[SchoolGateway, Depends(get_school_gateway)]
ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]


__all__ = ["GatewayDep", "ImageStoreDep"]

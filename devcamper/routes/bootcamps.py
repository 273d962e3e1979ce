"""
Bootcamp routes.

    GET    /bootcamps                              public
    GET    /bootcamps/{id}                         public
    GET    /bootcamps/radius/{zipcode}/{distance}  private
    POST   /bootcamps                              private
    PUT    /bootcamps/{id}                         private, owner or admin
    DELETE /bootcamps/{id}                         private, owner or admin
    PUT    /bootcamps/{id}/photo                   private, owner or admin
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from devcamper.auth import CurrentUser, authorize_owner_or_admin, get_current_user
from devcamper.config import Settings, get_settings
from devcamper.errors import ErrorResponse
from devcamper.models.bootcamp import Bootcamp
from devcamper.repositories.bootcamp_repo import BootcampRepository, get_bootcamp_repository
from devcamper.schemas.bootcamp import BootcampCreate, BootcampEnvelope, BootcampListEnvelope, BootcampUpdate
from devcamper.services.geocoder import NominatimGeocoder, get_geocoder
from devcamper.utils.advanced_results import AdvancedResults
from devcamper.utils.geo import distance_to_radians
from devcamper.utils.slug import slugify

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(repo: BootcampRepository, bootcamp_id: int) -> Bootcamp:
    bootcamp = repo.find_by_id(bootcamp_id)
    if not bootcamp:
        raise ErrorResponse(f"Bootcamp not found with id of {bootcamp_id}.", 404)
    return bootcamp


def _upload_size(file: UploadFile) -> int:
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    return size


@router.get("/bootcamps")
def get_bootcamps(results: Dict[str, Any] = Depends(AdvancedResults(Bootcamp))):
    """List bootcamps (filtered, sorted and paginated by the query string)"""
    return results


@router.get("/bootcamps/radius/{zipcode}/{distance}", response_model=BootcampListEnvelope)
def get_nearby_bootcamps(
    zipcode: str,
    distance: float,
    user: CurrentUser = Depends(get_current_user),
    repo: BootcampRepository = Depends(get_bootcamp_repository),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
):
    """Get bootcamps within ``distance`` miles of a zipcode"""
    loc = geocoder.geocode(zipcode)[0]
    radius = distance_to_radians(distance)
    bootcamps = repo.find_within_radius(loc.longitude, loc.latitude, radius)
    return {"success": True, "count": len(bootcamps), "data": bootcamps}


@router.get("/bootcamps/{bootcamp_id}", response_model=BootcampEnvelope)
def get_bootcamp(bootcamp_id: int, repo: BootcampRepository = Depends(get_bootcamp_repository)):
    """Get a bootcamp by ID"""
    return {"success": True, "data": _get_or_404(repo, bootcamp_id)}


@router.post("/bootcamps", response_model=BootcampEnvelope, status_code=201)
def create_bootcamp(
    bootcamp_data: BootcampCreate,
    user: CurrentUser = Depends(get_current_user),
    repo: BootcampRepository = Depends(get_bootcamp_repository),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
):
    """
    Create a bootcamp owned by the acting user.

    Non-admin users may publish only one bootcamp. The check is a plain
    read before the insert, so two concurrent requests from the same user
    can both pass it.
    """
    published = repo.find_one_by_user(user.id)
    if published and not user.is_admin:
        raise ErrorResponse(f"The user with id {user.id} has already published a bootcamp", 400)

    fields = bootcamp_data.model_dump(mode="json")
    address = fields.pop("address")
    fields.update(geocoder.geocode(address)[0].as_fields())
    fields["slug"] = slugify(fields["name"])
    fields["user_id"] = user.id

    bootcamp = repo.create(fields)
    logger.info(f"Bootcamp {bootcamp.id} created by user {user.id}")
    return {"success": True, "data": bootcamp}


@router.put("/bootcamps/{bootcamp_id}", response_model=BootcampEnvelope)
def update_bootcamp(
    bootcamp_id: int,
    bootcamp_data: BootcampUpdate,
    user: CurrentUser = Depends(get_current_user),
    repo: BootcampRepository = Depends(get_bootcamp_repository),
):
    """Update a bootcamp (owner or admin only)"""
    bootcamp = _get_or_404(repo, bootcamp_id)
    authorize_owner_or_admin(bootcamp, user, "update")

    update_data = bootcamp_data.model_dump(mode="json", exclude_unset=True)
    if "name" in update_data:
        update_data["slug"] = slugify(update_data["name"])

    bootcamp = repo.update(bootcamp_id, update_data)
    if bootcamp is None:
        # Removed between the lookup and the update
        raise ErrorResponse(f"Bootcamp not found with id of {bootcamp_id}.", 404)
    logger.info(f"Bootcamp {bootcamp_id} updated by user {user.id}: {sorted(update_data)}")
    return {"success": True, "data": bootcamp}


@router.delete("/bootcamps/{bootcamp_id}")
def delete_bootcamp(
    bootcamp_id: int,
    user: CurrentUser = Depends(get_current_user),
    repo: BootcampRepository = Depends(get_bootcamp_repository),
):
    """Delete a bootcamp (owner or admin only)"""
    bootcamp = _get_or_404(repo, bootcamp_id)
    authorize_owner_or_admin(bootcamp, user, "delete")

    repo.delete(bootcamp)
    logger.info(f"Bootcamp {bootcamp_id} deleted by user {user.id}")
    return {"success": True, "data": {}}


@router.put("/bootcamps/{bootcamp_id}/photo")
def bootcamp_photo_upload(
    bootcamp_id: int,
    file: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    repo: BootcampRepository = Depends(get_bootcamp_repository),
    settings: Settings = Depends(get_settings),
):
    """Upload a photo for a bootcamp (owner or admin only)"""
    bootcamp = _get_or_404(repo, bootcamp_id)
    authorize_owner_or_admin(bootcamp, user, "update")

    if file is None or not file.filename:
        raise ErrorResponse("Please upload a file.", 400)

    # Make sure upload is a photo
    if not (file.content_type or "").startswith("image"):
        raise ErrorResponse("Please upload an image file.", 400)

    if _upload_size(file) > settings.max_file_upload:
        raise ErrorResponse(f"Please upload an image under {settings.max_file_upload} bytes.", 400)

    filename = f"photo_{bootcamp.id}{Path(file.filename).suffix}"
    destination = Path(settings.file_upload_path) / filename

    try:
        with destination.open("wb") as out:
            shutil.copyfileobj(file.file, out)
    except OSError as e:
        logger.error(f"Failed to store upload for bootcamp {bootcamp_id} at {destination}: {e}")
        raise ErrorResponse("Problem with file upload.", 500)

    if repo.update(bootcamp_id, {"photo": filename}) is None:
        # Removed while the file was being written; the file is left in place
        raise ErrorResponse(f"Bootcamp not found with id of {bootcamp_id}.", 404)
    logger.info(f"Bootcamp {bootcamp_id} photo set to {filename}")
    return {"success": True, "data": filename}

import json
import logging
import uuid
from typing import List, Optional

from fastapi import UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from shared.core.claims import UserClaims
from shared.core.exceptions import InvalidRequest, NotFound, StorageIOError
from shared.helpers.asset_store import AssetStore, CleanupResult
from shared.helpers.user_helper import get_user_for_update, parse_uuid
from shared.models.users import Users
from shared.utils.enums import UploadFolder
from shared.utils.timeutils import utc_now

from ..schemas.branchschemas import Branch, BranchPayload

logger = logging.getLogger(__name__)

# query values that mean "the caller's own company"
OWN_COMPANY_MARKERS = ("", "null")


def parse_branch_data(data: Optional[str]) -> BranchPayload:
    """Decode the JSON ``data`` form field of a branch request."""
    if not data:
        raise InvalidRequest("Branch data is required")

    try:
        raw = json.loads(data)
    except ValueError as e:
        raise InvalidRequest(f"Invalid branch data format: {e}")

    if not isinstance(raw, dict):
        raise InvalidRequest("Invalid branch data format: expected a JSON object")

    try:
        return BranchPayload.model_validate(raw)
    except ValidationError as e:
        raise InvalidRequest(f"Invalid branch data format: {e.errors()[0]['msg']}")


def _branch_documents(account: Users) -> List[dict]:
    return list((account.company_info or {}).get("branches") or [])


def _store_branch_documents(account: Users, branches: List[dict]):
    info = dict(account.company_info or {})
    info["branches"] = branches
    account.company_info = info
    flag_modified(account, "company_info")


def _find_branch(branches: List[dict], branch_id: str) -> int:
    for index, document in enumerate(branches):
        if document.get("_id") == branch_id:
            return index
    return -1


def _save_images(store: AssetStore, images: List[UploadFile]) -> List[str]:
    paths = []
    for image in images or []:
        try:
            paths.append(store.save_upload(image, UploadFolder.BRANCHES.value))
        except StorageIOError:
            # a broken image never blocks the branch itself
            logger.warning(f"Skipping branch image '{image.filename}'")
    return paths


def create_branch(
        db: Session,
        store: AssetStore,
        owner_id: str,
        payload: BranchPayload,
        images: List[UploadFile]) -> Branch:
    owner_uuid = parse_uuid(owner_id, "Invalid user ID")
    if not db.query(Users.id).filter(Users.id == owner_uuid).first():
        raise NotFound("Company not found")

    image_paths = _save_images(store, images)

    now = utc_now()
    branch = Branch(
        id=str(uuid.uuid4()),
        images=image_paths,
        created_at=now,
        updated_at=now,
        **payload.changes(),
    )

    try:
        owner = get_user_for_update(db, owner_uuid, "Company not found")
        branches = _branch_documents(owner)
        branches.append(branch.to_document())
        _store_branch_documents(owner, branches)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save branch for {owner_id}: {e}")
        raise

    logger.info(f"Created branch {branch.id} for company {owner_id} with {len(image_paths)} image(s)")
    return branch


def list_branches(db: Session, claims: UserClaims, company_id: Optional[str] = None) -> List[Branch]:
    if company_id is not None and company_id.strip() not in OWN_COMPANY_MARKERS:
        account_id = parse_uuid(company_id.strip(), "Invalid company ID format")
    else:
        account_id = parse_uuid(claims.subject_id, "Invalid user ID")

    account = db.query(Users).filter(Users.id == account_id).first()
    if not account:
        raise NotFound("Company not found")

    return [Branch.model_validate(document) for document in _branch_documents(account)]


def update_branch(
        db: Session,
        store: AssetStore,
        owner_id: str,
        branch_id: str,
        payload: BranchPayload,
        images: List[UploadFile]) -> Branch:
    owner_uuid = parse_uuid(owner_id, "Invalid user ID")
    branch_key = str(parse_uuid(branch_id, "Invalid branch ID format"))

    try:
        owner = get_user_for_update(db, owner_uuid, "Company not found")
        branches = _branch_documents(owner)
        index = _find_branch(branches, branch_key)
        if index < 0:
            raise NotFound("Branch not found")

        existing = Branch.model_validate(branches[index])
        new_images = _save_images(store, images)
        replaced_images = existing.images if new_images else []

        updated = existing.model_copy(update={
            **payload.changes(),
            "images": new_images or existing.images,
            "updated_at": utc_now(),
        })

        # positional replace keeps the branch visible to concurrent readers
        branches[index] = updated.to_document()
        _store_branch_documents(owner, branches)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update branch {branch_key}: {e}")
        raise

    if replaced_images:
        store.delete_many(replaced_images)

    logger.info(f"Updated branch {branch_key} of company {owner_id}")
    return updated


def delete_branch(db: Session, store: AssetStore, owner_id: str, branch_id: str) -> CleanupResult:
    owner_uuid = parse_uuid(owner_id, "Invalid user ID")
    branch_key = str(parse_uuid(branch_id, "Invalid branch ID format"))

    try:
        owner = get_user_for_update(db, owner_uuid, "Company not found")
        branches = _branch_documents(owner)
        index = _find_branch(branches, branch_key)
        if index < 0:
            raise NotFound("Branch not found or already deleted")

        removed = branches.pop(index)
        _store_branch_documents(owner, branches)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete branch {branch_key}: {e}")
        raise

    logger.info(f"Deleted branch {branch_key} of company {owner_id}")
    return store.delete_many(removed.get("images") or [])

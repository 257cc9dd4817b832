from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.claims import UserClaims
from shared.core.database import get_db
from shared.helpers.asset_store import AssetStore, get_asset_store
from shared.helpers.json_response_helper import success_response
from shared.utils.enums import UserType
from ..schemas.companyschemas import CompanyDataUpdate
from ..services import branchservices, companyservices

router = APIRouter(prefix="/api/company", tags=["Company"])

company_only = auth.require_user_type(UserType.COMPANY.value)


@router.get("/data")
def get_company_data(
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    return success_response(companyservices.get_company_data(db, current_user.subject_id),
                            "Company data retrieved successfully")


@router.put("/data")
def update_company_data(
        payload: CompanyDataUpdate,
        db: Session = Depends(get_db),
        account_id: str = Depends(auth.get_current_subject_id)):
    if companyservices.update_company_data(db, account_id, payload):
        return success_response(message="Company data updated successfully")
    return success_response(message="No changes made to company data")


# -------- Branches --------

@router.post("/branches")
def create_branch(
        data: Optional[str] = Form(None),
        images: Optional[List[UploadFile]] = File(None),
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(company_only)):
    payload = branchservices.parse_branch_data(data)
    branch = branchservices.create_branch(db, store, current_user.subject_id, payload, images or [])
    return success_response(branch.to_document(), "Branch created successfully", status.HTTP_201_CREATED)


@router.get("/branches")
def get_branches(
        company_id: Optional[str] = Query(None, alias="companyId"),
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    branches = branchservices.list_branches(db, current_user, company_id)
    if not branches:
        return success_response([], "No branches found for this company")
    return success_response([b.to_document() for b in branches], "Branches retrieved successfully")


@router.put("/branches/{branch_id}")
def update_branch(
        branch_id: str,
        data: Optional[str] = Form(None),
        images: Optional[List[UploadFile]] = File(None),
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(company_only)):
    payload = branchservices.parse_branch_data(data)
    branch = branchservices.update_branch(
        db, store, current_user.subject_id, branch_id, payload, images or [])
    return success_response(branch.to_document(), "Branch updated successfully")


@router.delete("/branches/{branch_id}")
def delete_branch(
        branch_id: str,
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(company_only)):
    branchservices.delete_branch(db, store, current_user.subject_id, branch_id)
    return success_response(message="Branch deleted successfully")

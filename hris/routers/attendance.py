from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from hris.db import attendance_uploads_collection
from hris.models.attendance import AttendanceUpload
from hris.permissions import authorize
from hris.schemas.attendance import CreateAttendanceUpload
from hris.utils.app_utils import Identity, get_current_user

router = APIRouter()


@router.get("")
async def list_attendance_uploads(
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    identity: Identity = Depends(get_current_user),
):
    if employee_id and employee_id != identity.id:
        authorize(identity, "attendance:read_all")
    else:
        employee_id = identity.id

    uploads = attendance_uploads_collection.find({"employeeId": employee_id})
    return sorted(uploads, key=lambda upload: upload.get("uploadDate", ""), reverse=True)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_attendance_upload(
    upload_request: CreateAttendanceUpload,
    identity: Identity = Depends(get_current_user),
):
    upload = AttendanceUpload(
        employee_id=identity.id,
        **upload_request.model_dump(exclude_none=True),
    ).to_record()
    attendance_uploads_collection.insert_one(upload)
    return upload

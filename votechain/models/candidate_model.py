import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, constr, field_validator

NonEmptyStr = constr(strip_whitespace=True, min_length=1)

VerificationStatus = Literal["pending", "verified", "rejected"]


def _to_document(data: Dict[str, Any]) -> Dict[str, Any]:
    # BSON has no plain date type; store midnight UTC instead
    dob = data.get("dateOfBirth")
    if isinstance(dob, datetime.date) and not isinstance(dob, datetime.datetime):
        data["dateOfBirth"] = datetime.datetime.combine(dob, datetime.time.min)
    return data


class CandidateCreate(BaseModel):
    """Registration payload. Unknown fields are dropped, like a strict schema would."""
    model_config = ConfigDict(extra="ignore")

    name: NonEmptyStr = Field(..., examples=["Jane Doe"])
    party: NonEmptyStr = Field(..., examples=["Independent"])
    nationalId: NonEmptyStr = Field(..., examples=["1990123456789"])
    fathersName: Optional[NonEmptyStr] = None
    mothersName: Optional[NonEmptyStr] = None
    dateOfBirth: Optional[datetime.date] = None
    bloodGroup: Optional[NonEmptyStr] = None
    postOffice: Optional[NonEmptyStr] = None
    postCode: Optional[int] = None
    location: Optional[NonEmptyStr] = None


class CandidateUpdate(BaseModel):
    """Partial patch: only the fields present in the request body are validated and written."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[NonEmptyStr] = None
    party: Optional[NonEmptyStr] = None
    nationalId: Optional[NonEmptyStr] = None
    fathersName: Optional[NonEmptyStr] = None
    mothersName: Optional[NonEmptyStr] = None
    dateOfBirth: Optional[datetime.date] = None
    bloodGroup: Optional[NonEmptyStr] = None
    postOffice: Optional[NonEmptyStr] = None
    postCode: Optional[int] = None
    location: Optional[NonEmptyStr] = None
    faceId: Optional[NonEmptyStr] = None
    fingerprint: Optional[NonEmptyStr] = None
    isVerified: Optional[StrictBool] = None
    verificationStatus: Optional[VerificationStatus] = None

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value):
        # only runs for supplied fields
        if value is None:
            raise ValueError("must not be null")
        return value

    def to_patch(self) -> Dict[str, Any]:
        return _to_document(self.model_dump(exclude_unset=True))


class CandidateRecord(CandidateCreate):
    faceId: str
    fingerprint: str
    isVerified: bool = False
    verificationStatus: VerificationStatus = "pending"
    createdAt: datetime.datetime
    updatedAt: datetime.datetime

    def to_document(self) -> Dict[str, Any]:
        return _to_document(self.model_dump(exclude_none=True))

# archaea/api/schemas.py
from typing import Optional

from pydantic import BaseModel, Field

from archaea.models.curation import DecisionRequest, ECOD_GROUP_FIELDS


class ErrorResponse(BaseModel):
    error: str
    message: str


class DecisionBody(BaseModel):
    """Body of POST /api/curation/decide

    ECOD group fields that are left out of the body leave the stored
    classification alone; sending them as null clears it.
    """
    protein_id: str = Field("", description="Protein to decide on")
    curator: str = Field("", description="Name of the curator submitting the decision")
    decision_type: str = Field("", description="approve, classify, flag_novel, defer, reject or skip")
    ecod_x_group: Optional[int] = None
    ecod_h_group: Optional[int] = None
    ecod_t_group: Optional[int] = None
    ecod_f_group: Optional[int] = None
    is_novel_fold: Optional[bool] = None
    is_novel_topology: Optional[bool] = None
    confidence_level: Optional[int] = None
    notes: Optional[str] = None

    def to_request(self) -> DecisionRequest:
        groups = {name: getattr(self, name) for name in ECOD_GROUP_FIELDS
                  if name in self.model_fields_set}
        return DecisionRequest(
            protein_id=self.protein_id.strip(),
            curator=self.curator.strip(),
            decision_type=self.decision_type.strip(),
            is_novel_fold=self.is_novel_fold,
            is_novel_topology=self.is_novel_topology,
            confidence_level=self.confidence_level,
            notes=self.notes,
            **groups
        )


class DecisionResponse(BaseModel):
    success: bool = True
    protein_id: str
    new_status: str
    next_protein: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    database: bool

from pydantic import BaseModel, Field
from typing import Optional, Literal, List

class PreparedDocument(BaseModel):
    document: dict
    action: Literal['created', 'migrated', 'merged', 'validated']
    portfolio_id: Optional[str] = None
    problems: List[str] = Field(default_factory=list)

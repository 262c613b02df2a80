from pydantic import BaseModel


class UploadResponse(BaseModel):
    filePath: str

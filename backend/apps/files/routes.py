"""File routes - registers all file endpoints."""

from fastapi import APIRouter

from apps.files.handlers import parse_file

router = APIRouter(tags=["Files"])

# POST /parse-file - Extract text from an uploaded file
router.post("/parse-file")(parse_file)

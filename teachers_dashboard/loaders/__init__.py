"""Data ingestion loaders for the teacher and document registers."""

from .teacher_register import load_teacher_register, load_document_register

__all__ = [
    "load_teacher_register",
    "load_document_register",
]

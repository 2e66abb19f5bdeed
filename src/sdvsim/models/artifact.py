"""Generated code artifact consumed by the simulator.

The artifact comes from the code-generation service. Only its shape matters
here: the simulator refuses to run without code and copies the artifact's
language and size into the report.
"""

from __future__ import annotations

import hashlib
import json
import re
from enum import Enum

from pydantic import BaseModel, Field

from sdvsim.parameters import SHORT_HASH_LENGTH


class Language(Enum):
    """Target languages offered by the generator."""

    CPP = "cpp"
    JAVA = "java"
    RUST = "rust"

    @property
    def label(self) -> str:
        return {"cpp": "C++", "java": "Java", "rust": "Rust"}[self.value]

    @property
    def extension(self) -> str:
        return {"cpp": "cpp", "java": "java", "rust": "rs"}[self.value]


class ComponentType(Enum):
    """Kind of automotive component the code implements."""

    SERVICE = "service"
    SENSOR = "sensor"
    CONTROLLER = "controller"
    COMMUNICATION = "communication"

    @property
    def label(self) -> str:
        return {
            "service": "Service Interface",
            "sensor": "Sensor Handler",
            "controller": "Vehicle Controller",
            "communication": "Communication",
        }[self.value]


DEFAULT_STANDARDS = ["AUTOSAR Adaptive", "ISO 26262"]

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class GeneratedArtifact(BaseModel):
    """Code returned by the generation service.

    Attributes:
        language: Target language
        filename: Suggested filename
        code: Generated source text
        explanation: Short description of the implementation
        standards: Standards the code claims to follow
        warnings: Notes returned alongside the code
    """

    language: Language
    filename: str
    code: str
    explanation: str = ""
    standards: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_code(self) -> bool:
        return bool(self.code)

    @property
    def lines_of_code(self) -> int:
        if not self.code:
            return 0
        return len(self.code.split("\n"))

    @property
    def short_hash(self) -> str:
        digest = hashlib.sha256(self.code.encode("utf-8")).hexdigest()
        return digest[:SHORT_HASH_LENGTH]

    @classmethod
    def from_response(cls, content: str, language: Language = Language.CPP) -> GeneratedArtifact:
        """Build an artifact from raw service output.

        JSON (optionally inside a fenced block) is parsed as the artifact.
        Anything else is treated as bare code and wrapped with defaults.
        """
        match = _FENCED_JSON.search(content)
        json_content = match.group(1).strip() if match else content
        try:
            data = json.loads(json_content)
        except json.JSONDecodeError:
            data = None

        if isinstance(data, dict):
            data.setdefault("language", language.value)
            data.setdefault("filename", f"generated_service.{Language(data['language']).extension}")
            return cls.model_validate(data)

        return cls(
            language=language,
            filename=f"generated_service.{language.extension}",
            code=content,
            explanation="Generated automotive service code",
            standards=list(DEFAULT_STANDARDS),
        )

from enum import Enum


class RendererEnum(str, Enum):
    blockTree = "blockTree"
    fixedTemplate = "fixedTemplate"

from .file_builder import FileBuilder
from .picker_doubles import FakePicker, FakeTTY
from .workspace_builder import WorkspaceBuilder

__all__ = ['FileBuilder', 'FakePicker', 'FakeTTY', 'WorkspaceBuilder']

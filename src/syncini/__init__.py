import logging
from .interface import IniFile
from .registry import IniFileRegistry
from .dialects import IniFileType
from .document import IniDocument, Section, SectionCollection
from .reader import IniReader, IniReadState
from .writer import IniWriter, IniWriteState
from .args import Parameters, WriteParameters
from .entities import Comment, IniType, Option, SectionHeader
from .globals import VALID_MARKERS

logging.getLogger(__name__).addHandler(logging.NullHandler())

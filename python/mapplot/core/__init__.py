from . import progress
from .progress import get_progress_iterator

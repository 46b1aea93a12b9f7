"""
Run Package

Configuration, storage of genomes and training history, and the Trial base class.
"""

from evodrive.run.config  import Config
from evodrive.run.storage import (
    save_weights,
    load_weights,
    save_population,
    load_population,
    save_training_log
)
from evodrive.run.trial   import Trial

__all__ = [
    'Config',
    'Trial',
    'save_weights',
    'load_weights',
    'save_population',
    'load_population',
    'save_training_log',
]

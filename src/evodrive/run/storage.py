"""
Storage Module

Reading and writing of genomes and of the training history.

Weight files are JSON documents holding a single genome ({"weights": [...]})
or a whole population ({"genomes": [[...], ...]}); genes follow the layout of
'evodrive.genotype.codec'. The training log is a CSV file with one row per
evaluated generation.

Functions:
    save_weights(genome, path):     Write one genome to a JSON file
    load_weights(path):             Read one genome from a JSON file (None if missing)
    save_population(genomes, path): Write a list of genomes to a JSON file
    load_population(path):          Read a list of genomes from a JSON file
    save_training_log(state, path): Write the fitness and diversity histories to CSV
"""

import csv
import json
import numpy as np
from loguru  import logger
from pathlib import Path
from typing  import Sequence

from evodrive.pool.evolution_state import EvolutionState

def save_weights(genome: Sequence[float], path: str | Path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"weights": [float(gene) for gene in genome]}, indent=4))
    logger.info(f"[storage] Weights saved to: {path}")

def load_weights(path: str | Path) -> np.ndarray | None:
    """
    Read a genome written by 'save_weights'.

    Returns:
        The genome as a float64 array, or None if the file does not exist
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"[storage] File not found: {path}")
        return None

    data = json.loads(path.read_text())
    logger.info(f"[storage] Weights loaded from: {path}")
    return np.asarray(data["weights"], dtype=np.float64)

def save_population(genomes: Sequence[Sequence[float]], path: str | Path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {"genomes": [[float(gene) for gene in genome] for genome in genomes]}
    path.write_text(json.dumps(data))
    logger.info(f"[storage] Population of {len(genomes)} genomes saved to: {path}")

def load_population(path: str | Path) -> list[np.ndarray]:
    """Read the genomes written by 'save_population', in their original order."""
    path = Path(path)
    data = json.loads(path.read_text())
    logger.info(f"[storage] Population loaded from: {path}")
    return [np.asarray(genome, dtype=np.float64) for genome in data["genomes"]]

def save_training_log(state: EvolutionState, path: str | Path):
    """
    Write one CSV row per recorded generation with columns
    Generation (1-based), BestFitness, AvgFitness and Diversity.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Generation", "BestFitness", "AvgFitness", "Diversity"])
        for i, best in enumerate(state.best_fitness_history):
            avg = state.mean_fitness_history[i] if i < len(state.mean_fitness_history) else 0.0
            div = state.diversity_history[i]    if i < len(state.diversity_history)    else 0.0
            writer.writerow([i + 1, f"{best:.2f}", f"{avg:.2f}", f"{div:.2f}"])
    logger.info(f"[storage] Training log saved to: {path}")

"""
Visualization utilities for the optimizer.

Plots the best objective value and the best individual's genes for every
generation of a run.
"""

from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt

from .data_models import GenerationRecord
from .objective import DesignSpace


def plot_evolution(
    history: Sequence[GenerationRecord],
    design_space: Optional[DesignSpace] = None,
    objective_label: str = "Objective",
    figsize: Tuple[int, int] = (10, 6),
    save_path: Optional[str] = None,
    show: bool = False
) -> plt.Figure:
    """
    Biaxial line graph of a run's history.

    The objective of each generation's best individual is drawn against the
    left axis and its (decoded) genes against the right axis.

    Args:
        history: Generation records, baseline first
        design_space: Optional decoder for gene names and physical values
        objective_label: Label of the left axis
        figsize: Figure size (width, height)
        save_path: Optional path to save the figure
        show: Display the figure interactively

    Returns:
        The matplotlib Figure
    """
    if not history:
        raise ValueError("Cannot plot an empty history")

    steps = [record.generation for record in history]
    objective = [record.fittest.fitness for record in history]

    fig, ax_objective = plt.subplots(figsize=figsize)
    ax_genes = ax_objective.twinx()

    ax_objective.plot(steps, objective, color="black", linewidth=2, marker='o', label=objective_label)
    ax_objective.set_xlabel("Generation")
    ax_objective.set_ylabel(objective_label)

    n = len(history[0].fittest.chromosome)
    for k in range(n):
        if design_space is not None:
            spec = design_space.genes[k]
            values = [spec.decode(record.fittest.chromosome[k]) for record in history]
            label = f"{spec.name} ({spec.unit})" if spec.unit else spec.name
        else:
            values = [record.fittest.chromosome[k] for record in history]
            label = f"Var{k + 1}"
        ax_genes.plot(steps, values, linestyle='--', marker='.', label=label)
    ax_genes.set_ylabel("Variables")

    lines, labels = ax_objective.get_legend_handles_labels()
    gene_lines, gene_labels = ax_genes.get_legend_handles_labels()
    ax_objective.legend(lines + gene_lines, labels + gene_labels, loc='best', fontsize=8)
    ax_objective.grid(True, alpha=0.3)
    ax_objective.set_title("Evolution of the fittest individual")

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')

    if show:
        plt.show()

    return fig

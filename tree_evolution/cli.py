"""
tree_evolution/cli.py - Command-line interface
"""
import json
import logging
import time

import click

from .optimizer import CROSSOVER_TRIALS, Optimizer
from .problems import PROBLEMS, get_problem
from .tree import Tree


@click.group()
def cli():
    """Tree Evolution - Evolve tree-shaped programs toward a fitness goal"""
    pass


@cli.command()
@click.option('--problem', type=click.Choice(sorted(PROBLEMS)), default='equation',
              help='Problem to solve')
@click.option('--population', '-p', default=100, help='Target population size')
@click.option('--generations', '-g', type=int, default=None,
              help='Run a fixed number of generations')
@click.option('--target-fitness', '-t', type=float, default=None,
              help="Run until the best fitness reaches this value (default: the problem's target)")
@click.option('--crossover-trials', default=CROSSOVER_TRIALS, help='Crossover trials per generation')
@click.option('--kind-matched', is_flag=True, help='Only swap subtrees of the same kind')
@click.option('--out', '-o', type=click.Path(dir_okay=False), default=None,
              help='Write the best individual to this JSON file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def evolve(problem, population, generations, target_fitness, crossover_trials,
           kind_matched, out, verbose):
    """Evolve a population of trees for a problem"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if generations is not None and target_fitness is not None:
        raise click.UsageError('Use either --generations or --target-fitness, not both')

    selected = get_problem(problem)
    try:
        optimizer = Optimizer(selected.fitness, selected.random_individual,
                              max_population=population,
                              crossover_trials=crossover_trials,
                              kind_matched=kind_matched)
    except ValueError as e:
        raise click.ClickException(str(e))

    start_time = time.time()
    try:
        if generations is not None:
            click.echo(f"Starting evolution: {generations} generations, population {population}")
            best = optimizer.run(generations)
        else:
            threshold = selected.target_fitness if target_fitness is None else target_fitness
            click.echo(f"Starting evolution until fitness {threshold}, population {population}")
            best = optimizer.run_until_fitness(threshold)
    except ValueError as e:
        raise click.ClickException(str(e))
    total_time = time.time() - start_time

    best_fitness = float(selected.fitness(best))
    stats = optimizer.get_stats()
    click.echo(f"\nEvolution completed in {total_time:.1f}s after {optimizer.generation + 1} generations")
    click.echo(f"Best fitness: {best_fitness:.4f} (size: {best.size()}, depth: {best.depth()})")
    click.echo(f"Best tree: {best}")

    if out:
        result = {
            'problem': problem,
            'fitness': best_fitness,
            'rendered': str(best),
            'stats': stats,
            'tree': best.to_dict(),
        }
        try:
            with open(out, 'w') as f:
                json.dump(result, f, indent=2)
        except OSError as e:
            raise click.ClickException(f"Could not write {out}: {e}")
        click.echo(f"Best individual saved: {out}")


@cli.command()
@click.argument('result', type=click.Path(exists=True, dir_okay=False))
def show(result):
    """Re-score a saved best individual"""
    try:
        with open(result, 'r') as f:
            data = json.load(f)
        selected = get_problem(data['problem'])
        tree = Tree.from_dict(data['tree'], selected.kind_type)
    except (OSError, KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Error loading {result}: {e}")

    click.echo(f"Problem: {selected.name} - {selected.description}")
    click.echo(f"Fitness: {float(selected.fitness(tree)):.4f} (size: {tree.size()}, depth: {tree.depth()})")
    click.echo(f"Tree: {tree}")


@cli.command()
def problems():
    """List the available problems"""
    for name in sorted(PROBLEMS):
        selected = PROBLEMS[name]
        click.echo(f"{name:12s} target {selected.target_fitness:<6} {selected.description}")


if __name__ == '__main__':
    cli()

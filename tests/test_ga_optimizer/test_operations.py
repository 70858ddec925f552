"""
Tests for GA operators: parent selection, crossover, mutation and sharing.
"""

import math
import unittest

import numpy as np

from ga_optimizer.data_models import Individual, MatingPair
from ga_optimizer.selection import (
    SelectionError,
    roulette_wheel_weights,
    spin_wheel,
    select_parents_by_roulette_wheel,
    select_parents_by_tournament,
)
from ga_optimizer.crossover import blend_crossover
from ga_optimizer.mutation import mutant_count, pick_mutant_indices, mutate_one_gene
from ga_optimizer.sharing import sharing_function, niche_count, shared_fitness, apply_fitness_sharing


def make_survivors(fitness_values, chromosome_length=3, seed=0):
    rng = np.random.default_rng(seed)
    survivors = []
    for fitness in fitness_values:
        ind = Individual.create(chromosome_length, rng)
        ind.fitness = fitness
        survivors.append(ind)
    return survivors


class TestRouletteWheel(unittest.TestCase):
    """Test fitness-proportionate selection."""

    def setUp(self):
        """Set up RNG."""
        self.rng = np.random.default_rng(42)

    def test_weights_shift_by_lowest_survivor(self):
        """Weights are fitness minus the lowest survivor fitness."""
        survivors = make_survivors([5.0, 3.0, 2.0])
        np.testing.assert_allclose(roulette_wheel_weights(survivors), [3.0, 1.0, 0.0])

    def test_weights_handle_negative_fitness(self):
        """Negative fitness still yields non-negative weights."""
        survivors = make_survivors([-1.0, -2.0, -4.0])
        np.testing.assert_allclose(roulette_wheel_weights(survivors), [3.0, 2.0, 0.0])

    def test_equal_fitness_weighs_everyone_the_same(self):
        """With no weighted survivor every survivor weighs the same."""
        equal = make_survivors([1.0, 1.0, 1.0])
        np.testing.assert_allclose(roulette_wheel_weights(equal), [1.0, 1.0, 1.0])

    def test_dominant_survivor_keeps_its_weight(self):
        """A single dominant survivor is not flattened to uniform weights."""
        one_heavy = make_survivors([5.0, 1.0, 1.0])
        np.testing.assert_allclose(roulette_wheel_weights(one_heavy), [4.0, 0.0, 0.0])

    def test_dominant_survivor_is_always_dad(self):
        """Dad comes from the wheel; mom is drawn from the remaining survivors."""
        survivors = make_survivors([5.0, 1.0, 1.0])
        moms = set()
        for _ in range(100):
            pair = select_parents_by_roulette_wheel(survivors, self.rng)
            self.assertIs(pair.dad, survivors[0])
            moms.add(survivors.index(pair.mom))
        self.assertEqual(moms, {1, 2})

    def test_exhausted_mom_spins_raise(self):
        """A mom that never comes up within the retry bound is an error."""
        survivors = make_survivors([1e12, 1.0, 0.0])
        with self.assertRaises(SelectionError):
            select_parents_by_roulette_wheel(survivors, self.rng, max_retries=1)

    def test_weights_ignore_unevaluated(self):
        """Unevaluated survivors get zero weight."""
        survivors = make_survivors([4.0, 2.0, 1.0, float('nan')])
        weights = roulette_wheel_weights(survivors)
        self.assertEqual(weights[3], 0.0)
        np.testing.assert_allclose(weights[:3], [3.0, 1.0, 0.0])

    def test_spin_never_lands_on_zero_weight(self):
        """Zero-weight slots are never selected."""
        weights = np.array([0.0, 1.0, 0.0, 2.0])
        picks = {spin_wheel(weights, self.rng) for _ in range(200)}
        self.assertEqual(picks, {1, 3})

    def test_spin_is_fitness_proportionate(self):
        """Selection frequency follows the weights."""
        weights = np.array([3.0, 1.0])
        picks = [spin_wheel(weights, self.rng) for _ in range(4000)]
        share = picks.count(0) / len(picks)
        self.assertAlmostEqual(share, 0.75, delta=0.05)

    def test_selects_distinct_parents(self):
        """Dad and mom are always different survivors."""
        survivors = make_survivors([4.0, 3.0, 2.0, 1.0])
        for _ in range(50):
            pair = select_parents_by_roulette_wheel(survivors, self.rng)
            self.assertIsNot(pair.dad, pair.mom)
            self.assertIn(pair.dad, survivors)
            self.assertIn(pair.mom, survivors)

    def test_two_survivors_with_distinct_fitness(self):
        """Two survivors still produce a couple."""
        survivors = make_survivors([2.0, 1.0])
        pair = select_parents_by_roulette_wheel(survivors, self.rng)
        self.assertEqual(pair, MatingPair(survivors[0], survivors[1]))

    def test_requires_two_survivors(self):
        """A single survivor cannot form a couple."""
        with self.assertRaises(SelectionError):
            select_parents_by_roulette_wheel(make_survivors([1.0]), self.rng)


class TestTournament(unittest.TestCase):
    """Test tournament selection."""

    def setUp(self):
        """Set up RNG."""
        self.rng = np.random.default_rng(7)

    def test_requires_two_survivors(self):
        """Fewer than two survivors is a fatal precondition violation."""
        with self.assertRaises(SelectionError):
            select_parents_by_tournament(make_survivors([1.0]), self.rng)
        with self.assertRaises(SelectionError):
            select_parents_by_tournament([], self.rng)

    def test_two_survivors_pair_up(self):
        """The only possible couple is returned."""
        survivors = make_survivors([2.0, 1.0])
        pair = select_parents_by_tournament(survivors, self.rng)
        self.assertEqual(pair, MatingPair(survivors[0], survivors[1]))

    def test_lowest_survivor_never_wins(self):
        """Winners come from the survivor range excluding the lowest, and the
        weakest member of that range can never win a tournament."""
        survivors = make_survivors([5.0, 4.0, 3.0, 2.0, 1.0])
        winners = set()
        for _ in range(200):
            pair = select_parents_by_tournament(survivors, self.rng)
            self.assertIsNot(pair.dad, pair.mom)
            winners.add(survivors.index(pair.dad))
            winners.add(survivors.index(pair.mom))
        self.assertEqual(winners, {0, 1, 2})

    def test_three_survivors(self):
        """With three survivors the pool keeps everyone."""
        survivors = make_survivors([3.0, 2.0, 1.0])
        for _ in range(20):
            pair = select_parents_by_tournament(survivors, self.rng)
            self.assertIsNot(pair.dad, pair.mom)

    def test_equal_fitness(self):
        """Ties do not stall the selection."""
        survivors = make_survivors([1.0] * 5)
        pair = select_parents_by_tournament(survivors, self.rng)
        self.assertIsNot(pair.dad, pair.mom)


class TestBlendCrossover(unittest.TestCase):
    """Test blend crossover."""

    def setUp(self):
        """Set up parents."""
        self.rng = np.random.default_rng(3)
        self.dad = Individual(chromosome=[0.1, 0.9, 0.5, 0.3], fitness=2.0)
        self.mom = Individual(chromosome=[0.7, 0.2, 0.5, 0.8], fitness=1.0)

    def test_children_are_convex_combinations(self):
        """Every child gene lies between the parents' genes."""
        low = np.minimum(self.dad.chromosome, self.mom.chromosome)
        high = np.maximum(self.dad.chromosome, self.mom.chromosome)
        for rate in (0.0, 0.5, 1.0):
            for _ in range(20):
                child1, child2 = blend_crossover(MatingPair(self.dad, self.mom), rate, self.rng)
                for child in (child1, child2):
                    self.assertTrue(np.all(child.chromosome >= low))
                    self.assertTrue(np.all(child.chromosome <= high))

    def test_children_genes_sum_to_parents(self):
        """The two blends always split the parents' genes between the children."""
        child1, child2 = blend_crossover(MatingPair(self.dad, self.mom), 0.5, self.rng)
        np.testing.assert_allclose(child1.chromosome + child2.chromosome,
                                   self.dad.chromosome + self.mom.chromosome)

    def test_single_beta_per_mating(self):
        """All genes of a mating share one blend factor."""
        dad = Individual(chromosome=[0.0] * 6)
        mom = Individual(chromosome=[0.9] * 6)
        child1, child2 = blend_crossover(MatingPair(dad, mom), 1.0, self.rng)

        self.assertTrue(np.allclose(child1.chromosome, child1.chromosome[0]))
        self.assertTrue(np.allclose(child2.chromosome, child2.chromosome[0]))

    def test_children_are_new_and_unevaluated(self):
        """Children are fresh individuals without fitness."""
        child1, child2 = blend_crossover(MatingPair(self.dad, self.mom), 0.5, self.rng)
        self.assertIsNot(child1, self.dad)
        self.assertIsNot(child2, self.mom)
        self.assertTrue(math.isnan(child1.fitness))
        self.assertTrue(math.isnan(child2.fitness))

    def test_parents_unchanged(self):
        """Crossover does not modify the parents."""
        before = self.dad.chromosome.copy()
        blend_crossover(MatingPair(self.dad, self.mom), 0.5, self.rng)
        np.testing.assert_array_equal(self.dad.chromosome, before)

    def test_length_mismatch(self):
        """Parents of different lengths cannot mate."""
        other = Individual(chromosome=[0.5, 0.5])
        with self.assertRaises(ValueError):
            blend_crossover(MatingPair(self.dad, other), 0.5, self.rng)

    def test_discretized_children(self):
        """Children snap to the discretization levels."""
        dad = Individual(chromosome=[0.0, 0.5], discretization_steps=4)
        mom = Individual(chromosome=[0.75, 0.25], discretization_steps=4)
        child1, child2 = blend_crossover(MatingPair(dad, mom), 0.5, self.rng, discretization_steps=4)
        for gene in np.concatenate([child1.chromosome, child2.chromosome]):
            self.assertIn(gene, {0.0, 0.25, 0.5, 0.75})


class TestMutation(unittest.TestCase):
    """Test mutation helpers."""

    def setUp(self):
        """Set up RNG."""
        self.rng = np.random.default_rng(11)

    def test_mutant_count(self):
        """floor(rate * (n - 1)), at least one, at most n - 2."""
        self.assertEqual(mutant_count(0.0, 20), 0)
        self.assertEqual(mutant_count(0.1, 20), 1)
        self.assertEqual(mutant_count(0.01, 20), 1)
        self.assertEqual(mutant_count(0.5, 21), 10)
        self.assertEqual(mutant_count(1.0, 20), 18)

    def test_mutant_count_small_population(self):
        """Populations without an eligible slot get no mutants."""
        self.assertEqual(mutant_count(0.5, 2), 0)
        self.assertEqual(mutant_count(1.0, 3), 1)

    def test_pick_mutant_indices(self):
        """Indices are distinct and exclude the first and last slots."""
        for _ in range(50):
            indices = pick_mutant_indices(10, 5, self.rng)
            self.assertEqual(len(set(indices.tolist())), 5)
            self.assertTrue(all(1 <= k <= 8 for k in indices))

    def test_mutate_one_gene(self):
        """Exactly one gene changes and fitness is reset."""
        for _ in range(20):
            ind = Individual.create(6, self.rng)
            ind.fitness = 1.0
            before = ind.chromosome.copy()

            index = mutate_one_gene(ind, self.rng)

            changed = np.flatnonzero(ind.chromosome != before)
            self.assertEqual(changed.tolist(), [index])
            self.assertTrue(math.isnan(ind.fitness))

    def test_mutate_discretized_gene_moves_to_another_level(self):
        """A discretized gene always lands on a different level."""
        levels = {0.0, 0.25, 0.5, 0.75}
        for _ in range(200):
            ind = Individual.create(3, self.rng, discretization_steps=4)
            before = ind.chromosome.copy()

            index = mutate_one_gene(ind, self.rng, discretization_steps=4)

            changed = np.flatnonzero(ind.chromosome != before)
            self.assertEqual(changed.tolist(), [index])
            self.assertIn(ind.get_gene(index), levels)

    def test_mutate_two_level_gene_flips(self):
        """With two levels the only other level is chosen."""
        ind = Individual(chromosome=[0.5], discretization_steps=2)
        mutate_one_gene(ind, self.rng, discretization_steps=2)
        self.assertEqual(ind.get_gene(0), 0.0)

    def test_mutate_single_gene_chromosome(self):
        """A one-gene chromosome mutates its only gene."""
        ind = Individual(chromosome=[0.5])
        self.assertEqual(mutate_one_gene(ind, self.rng), 0)


class TestSharing(unittest.TestCase):
    """Test niche count and fitness sharing."""

    def test_sharing_function(self):
        """Triangular sharing inside sigma, zero outside."""
        self.assertEqual(sharing_function(0.0, 1.0), 1.0)
        self.assertAlmostEqual(sharing_function(0.25, 1.0), 0.75)
        self.assertEqual(sharing_function(1.0, 1.0), 0.0)
        self.assertEqual(sharing_function(2.0, 1.0), 0.0)

    def test_sharing_radius_must_be_positive(self):
        """Sigma of zero is rejected."""
        with self.assertRaises(ValueError):
            sharing_function(0.1, 0.0)

    def test_niche_count(self):
        """Niche count sums contributions including the individual itself."""
        a = Individual(chromosome=[0.0])
        b = Individual(chromosome=[0.05])
        c = Individual(chromosome=[0.9])

        self.assertAlmostEqual(niche_count(a, [a, b, c], 0.1), 1.0 + 0.5)
        self.assertAlmostEqual(niche_count(c, [a, b, c], 0.1), 1.0)

    def test_shared_fitness(self):
        """Crowded individuals are discounted; NaN stays NaN."""
        a = Individual(chromosome=[0.0], fitness=3.0)
        b = Individual(chromosome=[0.0], fitness=3.0)
        c = Individual(chromosome=[0.9], fitness=3.0)
        d = Individual(chromosome=[0.5])

        shared = shared_fitness([a, b, c, d], 0.1)

        self.assertAlmostEqual(shared[0], 1.5)
        self.assertAlmostEqual(shared[1], 1.5)
        self.assertAlmostEqual(shared[2], 3.0)
        self.assertTrue(math.isnan(shared[3]))

    def test_apply_fitness_sharing(self):
        """Shared fitness replaces raw fitness in place."""
        a = Individual(chromosome=[0.2], fitness=4.0)
        b = Individual(chromosome=[0.2], fitness=2.0)

        apply_fitness_sharing([a, b], 0.5)

        self.assertAlmostEqual(a.fitness, 2.0)
        self.assertAlmostEqual(b.fitness, 1.0)


if __name__ == '__main__':
    unittest.main()

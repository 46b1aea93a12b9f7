"""
Unit tests for the genome codec.

Tests cover the genome layout (weights first, neuron-major, then biases),
the round-trip laws, and length validation.
"""

import pytest
import numpy as np
from evodrive.genotype.codec import to_genome, from_genome, export_population, import_population
from evodrive.phenotype.network import Network, genome_length
from evodrive.exceptions import ShapeMismatchError


class TestGenomeLayout:
    """Test the order in which parameters appear in a genome."""

    def test_length_matches_formula(self, rng):
        """Test that the genome length equals the sum over layers of n_in*n_out + n_out."""
        for topology in ([3, 2, 1], [7, 8, 4, 2], [1, 1], [5, 3, 3, 3, 4]):
            network = Network(topology, rng=rng)
            assert to_genome(network).shape == (genome_length(topology),)

    def test_weights_then_biases_neuron_major(self, rng):
        """Test the exact layout on a [2, 2, 1] network with distinguishable values."""
        network = Network([2, 2, 1], rng=rng)
        network.weights[0][...] = [[1.0, 2.0],   # incoming weights of hidden neuron 0
                                   [3.0, 4.0]]   # incoming weights of hidden neuron 1
        network.weights[1][...] = [[5.0, 6.0]]
        network.biases[0][...]  = [7.0, 8.0]
        network.biases[1][...]  = [9.0]

        genome = to_genome(network)

        np.testing.assert_array_equal(genome, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0])

    def test_genome_is_a_copy(self, rng):
        """Test that modifying a genome does not modify the network."""
        network = Network([3, 2, 1], rng=rng)
        genome = to_genome(network)
        genome[:] = 0.0

        assert np.any(to_genome(network) != 0.0)


class TestRoundTrip:
    """Test the round-trip laws between networks and genomes."""

    def test_network_round_trip_bit_exact(self, rng):
        """Test that writing a network's own genome back leaves it unchanged."""
        network = Network([7, 8, 4, 2], rng=rng)
        weights_before = [w.copy() for w in network.weights]
        biases_before  = [b.copy() for b in network.biases]

        from_genome(network, to_genome(network))

        for before, after in zip(weights_before, network.weights):
            np.testing.assert_array_equal(before, after)
        for before, after in zip(biases_before, network.biases):
            np.testing.assert_array_equal(before, after)

    def test_genome_round_trip_bit_exact(self, rng):
        """Test that a genome written into a network is read back unchanged."""
        network = Network([3, 5, 2], rng=rng)
        genome = rng.uniform(-10.0, 10.0, size=network.num_parameters)

        from_genome(network, genome)

        np.testing.assert_array_equal(to_genome(network), genome)

    def test_from_genome_accepts_lists(self, rng):
        """Test that a plain list of floats is a valid genome."""
        network = Network([1, 1], rng=rng)

        from_genome(network, [0.25, -0.5])

        assert network.weights[0][0, 0] == 0.25
        assert network.biases[0][0] == -0.5

    def test_from_genome_is_in_place(self, rng):
        """Test that the network keeps its arrays when loading a genome."""
        network = Network([3, 2, 1], rng=rng)
        weight_arrays = [id(w) for w in network.weights]

        from_genome(network, np.zeros(network.num_parameters))

        assert [id(w) for w in network.weights] == weight_arrays
        assert network.forward_pass([1.0, 2.0, 3.0])[0] == 0.0

    def test_from_genome_does_not_alias_genome(self, rng):
        """Test that later changes to the genome do not leak into the network."""
        network = Network([2, 1], rng=rng)
        genome = np.array([1.0, 2.0, 3.0])
        from_genome(network, genome)
        genome[:] = 0.0

        np.testing.assert_array_equal(to_genome(network), [1.0, 2.0, 3.0])


class TestLengthValidation:
    """Test that genomes of the wrong length are rejected."""

    @pytest.mark.parametrize("length", [0, 10, 12])
    def test_wrong_length_raises(self, rng, length):
        """Test that a genome with the wrong number of genes is a shape mismatch."""
        network = Network([3, 2, 1], rng=rng)

        with pytest.raises(ShapeMismatchError) as exc_info:
            from_genome(network, np.zeros(length))
        assert exc_info.value.expected == 11
        assert exc_info.value.actual == length

    def test_wrong_length_leaves_network_unchanged(self, rng):
        """Test that a rejected genome does not partially overwrite the network."""
        network = Network([3, 2, 1], rng=rng)
        before = to_genome(network)

        with pytest.raises(ShapeMismatchError):
            from_genome(network, np.zeros(5))

        np.testing.assert_array_equal(to_genome(network), before)


class TestPopulationExport:
    """Test exporting and importing the genomes of a list of networks."""

    def test_export_import(self, rng):
        """Test that genomes move between networks in order."""
        networks = [Network([2, 2, 1], rng=rng) for _ in range(3)]
        genomes = export_population(networks)

        targets = [Network([2, 2, 1], rng=rng) for _ in range(3)]
        import_population(targets, genomes)

        for source, target in zip(networks, targets):
            np.testing.assert_array_equal(to_genome(source), to_genome(target))

    def test_import_count_mismatch_raises(self, rng):
        """Test that the number of genomes must match the number of networks."""
        networks = [Network([2, 1], rng=rng) for _ in range(3)]

        with pytest.raises(ShapeMismatchError):
            import_population(networks, [np.zeros(3), np.zeros(3)])

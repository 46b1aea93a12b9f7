import configparser
import os
from evodrive.activations import activations
from evodrive.exceptions  import InvalidConfigurationError
from evodrive.phenotype.network import validate_topology

class Config:

    @staticmethod
    def _parse_topology(raw_topology):
        """
        Parse the network topology from string to a list of layer sizes.

        Parameters:
            raw_topology: Either a comma-separated list ("7, 8, 4, 2") or already a sequence

        Returns:
            List of layer sizes
        """
        if isinstance(raw_topology, (list, tuple)):
            return list(raw_topology)
        if raw_topology is None:
            raise InvalidConfigurationError("A topology is required")
        try:
            return [int(size.strip()) for size in raw_topology.split(',')]
        except ValueError:
            raise InvalidConfigurationError(f"Invalid topology '{raw_topology}'") from None

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding the defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, every option takes its default value.
        """

        if config_file is not None and not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        if config_file is not None:
            parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, value_type, default):
            try:
                raw_value = parser.get(section, key)
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default
            if raw_value.lower() == 'none':
                return None
            try:
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                return raw_value
            except ValueError:
                raise InvalidConfigurationError(f"Bad value for '{key}' in section [{section}]: '{raw_value}'") from None

        # [NETWORK]

        # Layer sizes, from the input layer to the output layer. The default
        # matches a car with 5 distance rays plus speed and angular velocity
        # as inputs, and throttle and steering as outputs.
        self.topology = get_value('NETWORK', 'topology', str, default='7, 8, 4, 2')

        # Activation function of the hidden layers.
        # Options: 'tanh', 'relu', 'leaky_relu', 'sigmoid' (see 'basic_activations.py').
        # The output layer always uses 'tanh'.
        self.activation = get_value('NETWORK', 'activation', str, default='leaky_relu')

        # [POPULATION]

        # The number of individuals in each generation.
        self.population_size = get_value('POPULATION', 'population_size', int, default=20)

        # The number of most-fit individuals that will be
        # preserved as-is from one generation to the next.
        self.elite_count = get_value('POPULATION', 'elite_count', int, default=2)

        # The number of individuals sampled in each tournament when selecting a parent.
        self.tournament_size = get_value('POPULATION', 'tournament_size', int, default=3)

        # [MUTATION]

        # The probability that a gene is mutated. When the adaptive mutation is
        # enabled, this is the rate at generation 0.
        self.mutation_rate = get_value('MUTATION', 'mutation_rate', float, default=0.15)

        # Mutations add to a gene a value drawn uniformly from [-strength, strength].
        self.mutation_strength = get_value('MUTATION', 'mutation_strength', float, default=0.5)

        # Whether the mutation rate decays over the generations
        # (and is boosted when the population stagnates).
        self.adaptive_mutation = get_value('MUTATION', 'adaptive_mutation', bool, default=True)

        # The mutation rate reached after 'mutation_decay_generations' generations.
        # Only applicable if 'adaptive_mutation' is 'True'.
        self.final_mutation_rate        = get_value('MUTATION', 'final_mutation_rate', float, default=0.01)
        self.mutation_decay_generations = get_value('MUTATION', 'mutation_decay_generations', int, default=100)

        # The number of generations without improvement of the best fitness after
        # which the population counts as stagnant. The mutation rate is boosted
        # once half of this period has elapsed.
        self.max_stagnation_period = get_value('MUTATION', 'max_stagnation_period', int, default=20)

        # The factor by which a stagnant population's mutation rate
        # is multiplied, and the cap of the boosted rate.
        self.stagnation_boost  = get_value('MUTATION', 'stagnation_boost', float, default=1.5)
        self.max_mutation_rate = get_value('MUTATION', 'max_mutation_rate', float, default=0.3)

        # [CROSSOVER]

        # Relative weights with which each crossover operator is chosen
        # when creating an offspring. Set a weight to 0.0 to disable an operator.
        self.single_point_weight = get_value('CROSSOVER', 'single_point_weight', float, default=1.0)
        self.two_point_weight    = get_value('CROSSOVER', 'two_point_weight',    float, default=1.0)
        self.blend_weight        = get_value('CROSSOVER', 'blend_weight',        float, default=1.0)
        self.uniform_weight      = get_value('CROSSOVER', 'uniform_weight',      float, default=0.0)

        # How far beyond the parents' interval the blend crossover (BLX-alpha) may sample.
        self.blend_alpha = get_value('CROSSOVER', 'blend_alpha', float, default=0.5)

        # [GENES]

        # The minimum and maximum allowed gene values.
        # Mutated and blended genes outside this range will be clamped to this range.
        self.min_gene = get_value('GENES', 'min_gene', float, default=-10.0)
        self.max_gene = get_value('GENES', 'max_gene', float, default=10.0)

        # [TERMINATION]

        # The number of generations after which to stop a trial.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int, default=100)

        # [RANDOM]

        # Seed of the random generator; 'None' draws fresh entropy from the OS.
        self.seed = get_value('RANDOM', 'seed', int, default=None)

        self.validate()

    def __setattr__(self, name, value):
        """
        Override 'setattr' to automatically parse the topology when set.
        This allows users to write config.topology = "4, 8, 1".
        """
        if name == 'topology':
            value = self._parse_topology(value)
        super().__setattr__(name, value)

    @property
    def crossover_weights(self) -> dict[str, float]:
        """Relative weight of each crossover operator, in the order they are tried."""
        return {'single_point': self.single_point_weight,
                'two_point'   : self.two_point_weight,
                'blend'       : self.blend_weight,
                'uniform'     : self.uniform_weight}

    def validate(self):
        """
        Check that the configuration values are consistent.
        Raises InvalidConfigurationError describing the first problem found.
        """
        validate_topology(self.topology)

        if self.activation not in activations:
            raise InvalidConfigurationError(f"Unknown activation '{self.activation}', "
                                            f"expected one of {sorted(activations)}")

        if self.population_size is None or self.population_size < 1:
            raise InvalidConfigurationError(f"'population_size' must be at least 1, got {self.population_size}")
        if self.elite_count is None or not 0 <= self.elite_count < self.population_size:
            raise InvalidConfigurationError(f"'elite_count' must be in [0, {self.population_size}), got {self.elite_count}")
        if self.tournament_size is None or self.tournament_size < 1:
            raise InvalidConfigurationError(f"'tournament_size' must be at least 1, got {self.tournament_size}")

        for name in ('mutation_rate', 'final_mutation_rate', 'max_mutation_rate'):
            value = getattr(self, name)
            if value is None or not 0.0 <= value <= 1.0:
                raise InvalidConfigurationError(f"'{name}' must be in [0, 1], got {value}")
        if self.mutation_strength is None or self.mutation_strength < 0.0:
            raise InvalidConfigurationError(f"'mutation_strength' must be non-negative, got {self.mutation_strength}")
        if self.mutation_decay_generations is None or self.mutation_decay_generations < 1:
            raise InvalidConfigurationError(f"'mutation_decay_generations' must be at least 1, "
                                            f"got {self.mutation_decay_generations}")
        if self.max_stagnation_period is None or self.max_stagnation_period < 0:
            raise InvalidConfigurationError(f"'max_stagnation_period' must be non-negative, "
                                            f"got {self.max_stagnation_period}")
        if self.stagnation_boost is None or self.stagnation_boost < 0.0:
            raise InvalidConfigurationError(f"'stagnation_boost' must be non-negative, got {self.stagnation_boost}")

        weights = self.crossover_weights
        for name, weight in weights.items():
            if weight is None or weight < 0.0:
                raise InvalidConfigurationError(f"'{name}_weight' must be non-negative, got {weight}")
        if sum(weights.values()) <= 0.0:
            raise InvalidConfigurationError("At least one crossover weight must be positive")
        if self.blend_alpha is None or self.blend_alpha < 0.0:
            raise InvalidConfigurationError(f"'blend_alpha' must be non-negative, got {self.blend_alpha}")

        if self.min_gene is None or self.max_gene is None or self.min_gene > self.max_gene:
            raise InvalidConfigurationError(f"'min_gene' ({self.min_gene}) must not exceed 'max_gene' ({self.max_gene})")
        if self.max_number_generations is None or self.max_number_generations < 0:
            raise InvalidConfigurationError(f"'max_number_generations' must be non-negative, "
                                            f"got {self.max_number_generations}")

"""
Neural Network Module

A small feed forward neural network engine with three ways to train it:
online backpropagation, batch resilient propagation and genetic breeding,
plus utilities for normalizing categorical and continuous datasets.
"""

from .activations import ActivationFunction, HyperbolicTangent, Sigmoid, get_activation
from .breeder import Generation, Individual, PopulationBreeder, SpeedReward
from .controllers import Controller, UserInputController, NeuralNetworkController
from .exceptions import (
    DimensionMismatch, InvalidNetworkFile, InvalidTopology, NeuralNetworkError,
    NoLayers, NotReady, StructureMismatch, UnknownCategory
)
from .genetics import GeneticAlgorithm
from .layers import Neuron, NeuronLayer
from .networks import NeuralNetwork
from .trainer import (
    Backpropagation, NetworkTrainer, ResilientPropagation, TrainingConfig, TrainingHistory
)
from .utils import (
    export_network, format_structure, import_network, load_network, one_hot_encode,
    save_network
)

__version__ = '1.0.0'

__all__ = [
    # Networks
    'NeuralNetwork',
    'NeuronLayer',
    'Neuron',

    # Activations
    'ActivationFunction',
    'Sigmoid',
    'HyperbolicTangent',
    'get_activation',

    # Training
    'TrainingConfig',
    'TrainingHistory',
    'NetworkTrainer',
    'Backpropagation',
    'ResilientPropagation',
    'GeneticAlgorithm',

    # Populations
    'Controller',
    'NeuralNetworkController',
    'UserInputController',
    'PopulationBreeder',
    'Individual',
    'Generation',
    'SpeedReward',

    # Errors
    'NeuralNetworkError',
    'NotReady',
    'NoLayers',
    'InvalidTopology',
    'DimensionMismatch',
    'StructureMismatch',
    'UnknownCategory',
    'InvalidNetworkFile',

    # Utils
    'one_hot_encode',
    'save_network',
    'load_network',
    'export_network',
    'import_network',
    'format_structure',
]

"""Gadgets over an arithmetic backend: Poseidon sponge, ECIES encryption."""

from circuits.poseidon import Poseidon, PoseidonParameters, default_parameters
from circuits.ecies import ECIESPoseidonEncryption, DomainParameters

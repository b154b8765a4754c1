from .base import Step, StepAction
from .create_vm import StepCreateVM
from .hyperthreading import StepSetHyperThreading
from .port_forwarding import StepForwardPorts
from .start_vm import StepStartVM
from .stop_vm import StepStopVM

__all__ = [
    "Step",
    "StepAction",
    "StepCreateVM",
    "StepSetHyperThreading",
    "StepForwardPorts",
    "StepStartVM",
    "StepStopVM",
]

"""
LV2 Term Enumerations.

Closed enumerations of the class and value IRIs recognized by the
schema mapper. Every member's value is its full IRI, so members compare
equal to the plain IRI string and can be rebuilt with ``from_iri``.

Components:
- PluginClass: lv2:Plugin and its standard subclasses, with superclasses
- PortClass: port direction and port type classes
- HostFeature / ExtensionData / Option: plugin capability IRIs
- PortProperty / PortDesignation / Unit: port annotation IRIs
- Extension: identifiers of the extensions with typed payloads
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple, Type, TypeVar, Union

from rdflib import URIRef

_LV2 = "http://lv2plug.in/ns/lv2core#"
_ATOM = "http://lv2plug.in/ns/ext/atom#"
_BUFSZ = "http://lv2plug.in/ns/ext/buf-size#"
_EV = "http://lv2plug.in/ns/ext/event#"
_LOG = "http://lv2plug.in/ns/ext/log#"
_MORPH = "http://lv2plug.in/ns/ext/morph#"
_OPTS = "http://lv2plug.in/ns/ext/options#"
_PARAM = "http://lv2plug.in/ns/ext/parameters#"
_PG = "http://lv2plug.in/ns/ext/port-groups#"
_PPROPS = "http://lv2plug.in/ns/ext/port-props#"
_RSZ = "http://lv2plug.in/ns/ext/resize-port#"
_STATE = "http://lv2plug.in/ns/ext/state#"
_UI = "http://lv2plug.in/ns/extensions/ui#"
_UNITS = "http://lv2plug.in/ns/extensions/units#"
_URID = "http://lv2plug.in/ns/ext/urid#"
_WORK = "http://lv2plug.in/ns/ext/worker#"

E = TypeVar("E", bound="IriEnum")


class IriEnum(str, Enum):
    """Base for enumerations whose values are IRIs."""

    @property
    def iri(self) -> URIRef:
        """The member as an rdflib IRI."""
        return URIRef(self.value)

    @classmethod
    def from_iri(cls: Type[E], iri: Union[str, URIRef]) -> Optional[E]:
        """Look up the member for an IRI, or None when it is not recognized."""
        return cls._value2member_map_.get(str(iri))  # type: ignore[return-value]

    def __str__(self) -> str:
        return self.value


class PluginClass(IriEnum):
    """lv2:Plugin and its standard subclasses."""
    PLUGIN = _LV2 + "Plugin"
    DELAY = _LV2 + "DelayPlugin"
    REVERB = _LV2 + "ReverbPlugin"
    SIMULATOR = _LV2 + "SimulatorPlugin"
    DISTORTION = _LV2 + "DistortionPlugin"
    WAVESHAPER = _LV2 + "WaveshaperPlugin"
    DYNAMICS = _LV2 + "DynamicsPlugin"
    AMPLIFIER = _LV2 + "AmplifierPlugin"
    COMPRESSOR = _LV2 + "CompressorPlugin"
    ENVELOPE = _LV2 + "EnvelopePlugin"
    EXPANDER = _LV2 + "ExpanderPlugin"
    GATE = _LV2 + "GatePlugin"
    LIMITER = _LV2 + "LimiterPlugin"
    FILTER = _LV2 + "FilterPlugin"
    ALLPASS = _LV2 + "AllpassPlugin"
    BANDPASS = _LV2 + "BandpassPlugin"
    COMB = _LV2 + "CombPlugin"
    EQ = _LV2 + "EQPlugin"
    MULTI_EQ = _LV2 + "MultiEQPlugin"
    PARA_EQ = _LV2 + "ParaEQPlugin"
    HIGHPASS = _LV2 + "HighpassPlugin"
    LOWPASS = _LV2 + "LowpassPlugin"
    GENERATOR = _LV2 + "GeneratorPlugin"
    CONSTANT = _LV2 + "ConstantPlugin"
    INSTRUMENT = _LV2 + "InstrumentPlugin"
    OSCILLATOR = _LV2 + "OscillatorPlugin"
    MODULATOR = _LV2 + "ModulatorPlugin"
    CHORUS = _LV2 + "ChorusPlugin"
    FLANGER = _LV2 + "FlangerPlugin"
    PHASER = _LV2 + "PhaserPlugin"
    SPATIAL = _LV2 + "SpatialPlugin"
    SPECTRAL = _LV2 + "SpectralPlugin"
    PITCH = _LV2 + "PitchPlugin"
    UTILITY = _LV2 + "UtilityPlugin"
    ANALYSER = _LV2 + "AnalyserPlugin"
    CONVERTER = _LV2 + "ConverterPlugin"
    FUNCTION = _LV2 + "FunctionPlugin"
    MIXER = _LV2 + "MixerPlugin"


# Direct superclasses of each plugin class (rdfs:subClassOf in lv2core)
PLUGIN_CLASS_PARENTS: Dict[PluginClass, Tuple[PluginClass, ...]] = {
    PluginClass.PLUGIN: (),
    PluginClass.DELAY: (PluginClass.PLUGIN,),
    PluginClass.REVERB: (PluginClass.PLUGIN, PluginClass.DELAY, PluginClass.SIMULATOR),
    PluginClass.SIMULATOR: (PluginClass.PLUGIN,),
    PluginClass.DISTORTION: (PluginClass.PLUGIN,),
    PluginClass.WAVESHAPER: (PluginClass.DISTORTION,),
    PluginClass.DYNAMICS: (PluginClass.PLUGIN,),
    PluginClass.AMPLIFIER: (PluginClass.DYNAMICS,),
    PluginClass.COMPRESSOR: (PluginClass.DYNAMICS,),
    PluginClass.ENVELOPE: (PluginClass.DYNAMICS,),
    PluginClass.EXPANDER: (PluginClass.DYNAMICS,),
    PluginClass.GATE: (PluginClass.DYNAMICS,),
    PluginClass.LIMITER: (PluginClass.DYNAMICS,),
    PluginClass.FILTER: (PluginClass.PLUGIN,),
    PluginClass.ALLPASS: (PluginClass.FILTER,),
    PluginClass.BANDPASS: (PluginClass.FILTER,),
    PluginClass.COMB: (PluginClass.FILTER,),
    PluginClass.EQ: (PluginClass.FILTER,),
    PluginClass.MULTI_EQ: (PluginClass.EQ,),
    PluginClass.PARA_EQ: (PluginClass.EQ,),
    PluginClass.HIGHPASS: (PluginClass.FILTER,),
    PluginClass.LOWPASS: (PluginClass.FILTER,),
    PluginClass.GENERATOR: (PluginClass.PLUGIN,),
    PluginClass.CONSTANT: (PluginClass.GENERATOR,),
    PluginClass.INSTRUMENT: (PluginClass.GENERATOR,),
    PluginClass.OSCILLATOR: (PluginClass.GENERATOR,),
    PluginClass.MODULATOR: (PluginClass.PLUGIN,),
    PluginClass.CHORUS: (PluginClass.MODULATOR,),
    PluginClass.FLANGER: (PluginClass.MODULATOR,),
    PluginClass.PHASER: (PluginClass.MODULATOR,),
    PluginClass.SPATIAL: (PluginClass.PLUGIN,),
    PluginClass.SPECTRAL: (PluginClass.PLUGIN,),
    PluginClass.PITCH: (PluginClass.SPECTRAL,),
    PluginClass.UTILITY: (PluginClass.PLUGIN,),
    PluginClass.ANALYSER: (PluginClass.UTILITY,),
    PluginClass.CONVERTER: (PluginClass.UTILITY,),
    PluginClass.FUNCTION: (PluginClass.UTILITY,),
    PluginClass.MIXER: (PluginClass.UTILITY,),
}


class PortClass(IriEnum):
    """Port direction and port type classes."""
    INPUT = _LV2 + "InputPort"
    OUTPUT = _LV2 + "OutputPort"
    AUDIO = _LV2 + "AudioPort"
    CONTROL = _LV2 + "ControlPort"
    CV = _LV2 + "CVPort"
    ATOM = _ATOM + "AtomPort"
    EVENT = _EV + "EventPort"
    MORPH = _MORPH + "MorphPort"
    AUTO_MORPH = _MORPH + "AutoMorphPort"


PORT_DIRECTION_CLASSES: FrozenSet[PortClass] = frozenset({PortClass.INPUT, PortClass.OUTPUT})

# At most one of these may be claimed by a port
PORT_TYPE_CLASSES: FrozenSet[PortClass] = frozenset({
    PortClass.AUDIO,
    PortClass.CONTROL,
    PortClass.CV,
    PortClass.ATOM,
    PortClass.EVENT,
})


class HostFeature(IriEnum):
    """Host features a plugin may require or optionally support."""
    HARD_RT_CAPABLE = _LV2 + "hardRTCapable"
    IN_PLACE_BROKEN = _LV2 + "inPlaceBroken"
    IS_LIVE = _LV2 + "isLive"
    BOUNDED_BLOCK_LENGTH = _BUFSZ + "boundedBlockLength"
    COARSE_BLOCK_LENGTH = _BUFSZ + "coarseBlockLength"
    FIXED_BLOCK_LENGTH = _BUFSZ + "fixedBlockLength"
    POWER_OF_2_BLOCK_LENGTH = _BUFSZ + "powerOf2BlockLength"
    DATA_ACCESS = "http://lv2plug.in/ns/ext/data-access"
    INSTANCE_ACCESS = "http://lv2plug.in/ns/ext/instance-access"
    LOG = _LOG + "log"
    OPTIONS = _OPTS + "options"
    STRICT_BOUNDS = _PPROPS + "supportsStrictBounds"
    RESIZE = _RSZ + "resize"
    LOAD_DEFAULT_STATE = _STATE + "loadDefaultState"
    MAKE_PATH = _STATE + "makePath"
    MAP_PATH = _STATE + "mapPath"
    THREAD_SAFE_RESTORE = _STATE + "threadSafeRestore"
    UI_FIXED_SIZE = _UI + "fixedSize"
    UI_IDLE_INTERFACE = _UI + "idleInterface"
    UI_NO_USER_RESIZE = _UI + "noUserResize"
    UI_PARENT = _UI + "parent"
    UI_PORT_MAP = _UI + "portMap"
    UI_PORT_SUBSCRIBE = _UI + "portSubscribe"
    UI_RESIZE = _UI + "resize"
    UI_TOUCH = _UI + "touch"
    URID_MAP = _URID + "map"
    URID_UNMAP = _URID + "unmap"
    WORKER_SCHEDULE = _WORK + "schedule"


class ExtensionData(IriEnum):
    """Extension data interfaces returned by ``LV2_Descriptor::extension_data``."""
    OPTIONS_INTERFACE = _OPTS + "interface"
    STATE_INTERFACE = _STATE + "interface"
    UI_IDLE_INTERFACE = _UI + "idleInterface"
    UI_RESIZE = _UI + "resize"
    UI_SHOW_INTERFACE = _UI + "showInterface"
    WORKER_INTERFACE = _WORK + "interface"


class Option(IriEnum):
    """Options a plugin may require or support through the options extension."""
    MAX_BLOCK_LENGTH = _BUFSZ + "maxBlockLength"
    MIN_BLOCK_LENGTH = _BUFSZ + "minBlockLength"
    NOMINAL_BLOCK_LENGTH = _BUFSZ + "nominalBlockLength"
    SEQUENCE_SIZE = _BUFSZ + "sequenceSize"


class PortProperty(IriEnum):
    """Port properties from lv2core and the port-props extension."""
    CONNECTION_OPTIONAL = _LV2 + "connectionOptional"
    ENUMERATION = _LV2 + "enumeration"
    INTEGER = _LV2 + "integer"
    IS_SIDE_CHAIN = _LV2 + "isSideChain"
    REPORTS_LATENCY = _LV2 + "reportsLatency"
    SAMPLE_RATE = _LV2 + "sampleRate"
    TOGGLED = _LV2 + "toggled"
    CAUSES_ARTIFACTS = _PPROPS + "causesArtifacts"
    CONTINUOUS_CV = _PPROPS + "continuousCV"
    DISCRETE_CV = _PPROPS + "discreteCV"
    EXPENSIVE = _PPROPS + "expensive"
    HAS_STRICT_BOUNDS = _PPROPS + "hasStrictBounds"
    LOGARITHMIC = _PPROPS + "logarithmic"
    NOT_AUTOMATIC = _PPROPS + "notAutomatic"
    NOT_ON_GUI = _PPROPS + "notOnGUI"
    TRIGGER = _PPROPS + "trigger"


class PortDesignation(IriEnum):
    """Port designations: parameters, lv2core controls and port-group channels."""
    AMPLITUDE = _PARAM + "amplitude"
    ATTACK = _PARAM + "attack"
    CUTOFF_FREQUENCY = _PARAM + "cutoffFrequency"
    DECAY = _PARAM + "decay"
    DELAY = _PARAM + "delay"
    DRY_LEVEL = _PARAM + "dryLevel"
    FREQUENCY = _PARAM + "frequency"
    GAIN = _PARAM + "gain"
    HOLD = _PARAM + "hold"
    PULSE_WIDTH = _PARAM + "pulseWidth"
    RATIO = _PARAM + "ratio"
    RELEASE = _PARAM + "release"
    RESONANCE = _PARAM + "resonance"
    PARAM_SAMPLE_RATE = _PARAM + "sampleRate"
    SUSTAIN = _PARAM + "sustain"
    THRESHOLD = _PARAM + "threshold"
    WAVEFORM = _PARAM + "waveform"
    WET_DRY_RATIO = _PARAM + "wetDryRatio"
    WET_LEVEL = _PARAM + "wetLevel"
    CONTROL = _LV2 + "control"
    ENABLED = _LV2 + "enabled"
    FREE_WHEELING = _LV2 + "freeWheeling"
    CENTER = _PG + "center"
    CENTER_LEFT = _PG + "centerLeft"
    CENTER_RIGHT = _PG + "centerRight"
    LEFT = _PG + "left"
    LOW_FREQUENCY_EFFECTS = _PG + "lowFrequencyEffects"
    REAR_CENTER = _PG + "rearCenter"
    REAR_LEFT = _PG + "rearLeft"
    REAR_RIGHT = _PG + "rearRight"
    RIGHT = _PG + "right"
    SIDE = _PG + "side"
    SIDE_LEFT = _PG + "sideLeft"
    SIDE_RIGHT = _PG + "sideRight"


class Unit(IriEnum):
    """Units from the units extension."""
    BAR = _UNITS + "bar"
    BEAT = _UNITS + "beat"
    BPM = _UNITS + "bpm"
    CENT = _UNITS + "cent"
    CENTIMETRE = _UNITS + "cm"
    COEFFICIENT = _UNITS + "coef"
    DECIBEL = _UNITS + "db"
    DEGREE = _UNITS + "degree"
    FRAME = _UNITS + "frame"
    HERTZ = _UNITS + "hz"
    INCH = _UNITS + "inch"
    KILOHERTZ = _UNITS + "khz"
    KILOMETRE = _UNITS + "km"
    METRE = _UNITS + "m"
    MEGAHERTZ = _UNITS + "mhz"
    MIDI_NOTE = _UNITS + "midiNote"
    MILE = _UNITS + "mile"
    MINUTE = _UNITS + "min"
    MILLIMETRE = _UNITS + "mm"
    MILLISECOND = _UNITS + "ms"
    OCTAVE = _UNITS + "oct"
    PERCENT = _UNITS + "pc"
    SECOND = _UNITS + "s"
    SEMITONE = _UNITS + "semitone12TET"


# Units implied by a port designation when the port declares none
UNITS_IMPLIED_BY_DESIGNATION: Dict[PortDesignation, Unit] = {
    PortDesignation.GAIN: Unit.DECIBEL,
}


class Extension(IriEnum):
    """Extensions whose data is mapped into typed payloads."""
    UNITS = _UNITS
    ATOM = _ATOM
    PORT_GROUPS = _PG
    RESIZE_PORT = _RSZ
    PORT_PROPS = _PPROPS
    OPTIONS = _OPTS

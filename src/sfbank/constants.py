# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Constants shared by the bank assembler, the writer and the reader.
"""

# Generator enumerators (SF2 2.04, section 8.1.2)
GENERATOR_IDS = {
    "startAddrsOffset": 0,
    "endAddrsOffset": 1,
    "startloopAddrsOffset": 2,
    "endloopAddrsOffset": 3,
    "startAddrsCoarseOffset": 4,
    "modLfoToPitch": 5,
    "vibLfoToPitch": 6,
    "modEnvToPitch": 7,
    "initialFilterFc": 8,
    "initialFilterQ": 9,
    "modLfoToFilterFc": 10,
    "modEnvToFilterFc": 11,
    "endAddrsCoarseOffset": 12,
    "modLfoToVolume": 13,
    "chorusEffectsSend": 15,
    "reverbEffectsSend": 16,
    "pan": 17,
    "delayModLFO": 21,
    "freqModLFO": 22,
    "delayVibLFO": 23,
    "freqVibLFO": 24,
    "delayModEnv": 25,
    "attackModEnv": 26,
    "holdModEnv": 27,
    "decayModEnv": 28,
    "sustainModEnv": 29,
    "releaseModEnv": 30,
    "keynumToModEnvHold": 31,
    "keynumToModEnvDecay": 32,
    "delayVolEnv": 33,
    "attackVolEnv": 34,
    "holdVolEnv": 35,
    "decayVolEnv": 36,
    "sustainVolEnv": 37,
    "releaseVolEnv": 38,
    "keynumToVolEnvHold": 39,
    "keynumToVolEnvDecay": 40,
    "instrument": 41,
    "keyRange": 43,
    "velRange": 44,
    "startloopAddrsCoarseOffset": 45,
    "keynum": 46,
    "velocity": 47,
    "initialAttenuation": 48,
    "endloopAddrsCoarseOffset": 50,
    "coarseTune": 51,
    "fineTune": 52,
    "sampleID": 53,
    "sampleModes": 54,
    "scaleTuning": 56,
    "exclusiveClass": 57,
    "overridingRootKey": 58,
}

GENERATOR_NAMES = {id_: name for name, id_ in GENERATOR_IDS.items()}

# Values of the sampleModes generator
SAMPLE_MODE_LOOP_CONTINUOUSLY = 1

SAMPLE_TYPE_MONO = 1

# Bank layout limits
MAX_PRESETS_PER_BANK = 128
MAX_NAME_LENGTH = 128
RECORD_NAME_SIZE = 20

# Zero points written after every sample in the smpl chunk
SAMPLE_PADDING = 46

# Sample playback defaults
DEFAULT_BANK_NUMBER = 0
DEFAULT_ROOT_KEY = 60
DEFAULT_SAMPLE_RATE = 44100
PITCH_CORRECTION_NONE = 0
DEFAULT_REVERB_SEND = 618

# A canonical WAV header with no payload
WAV_HEADER_SIZE = 44

DEFAULT_OUTPUT_NAME = "output.sf2"

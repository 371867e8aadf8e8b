"""Enum definitions for equipment service models."""

import enum


class EquipmentType(str, enum.Enum):
    STICK = "STICK"
    GLOVE = "GLOVE"
    MASK = "MASK"
    SNORKEL = "SNORKEL"
    FINS = "FINS"
    CAP = "CAP"
    PUCK = "PUCK"
    GOAL = "GOAL"


class EquipmentCondition(str, enum.Enum):
    NEW = "NEW"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


class EquipmentSize(str, enum.Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"
    JUNIOR = "JUNIOR"
    ADULT = "ADULT"
    ONE_SIZE = "ONE_SIZE"

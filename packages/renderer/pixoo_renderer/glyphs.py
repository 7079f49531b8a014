"""PICO-8 style 3-column bitmap glyphs for on-canvas text."""

from __future__ import annotations

from types import MappingProxyType

GLYPH_STRIDE = 3

# Row-major bits, three per row. Some entries are shorter than five full rows;
# missing trailing cells are simply not drawn.
_GLYPH_BITS = {
    "0": "111101101101111",
    "1": "110010010010111",
    "2": "111001111100111",
    "3": "111001011001111",
    "4": "101101111001001",
    "5": "111100111001111",
    "6": "100100111101111",
    "7": "111001001001001",
    "8": "111101111101111",
    "9": "111101111001001",
    "a": "000011101111101",
    "b": "000110110101111",
    "c": "000011100100011",
    "d": "00011010110111",
    "e": "000111110100011",
    "f": "0001111101001",
    "g": "000011100101111",
    "h": "000101101111101",
    "i": "000111010010111",
    "j": "00011101001011",
    "k": "000101110101101",
    "l": "000100100100011",
    "m": "000111111101101",
    "n": "000110101101101",
    "o": "00001110110111",
    "p": "0000111011111",
    "q": "000010101110011",
    "r": "000110101110101",
    "s": "00001110000111",
    "t": "00011101001001",
    "u": "000101101101011",
    "v": "00010110111101",
    "w": "000101101111111",
    "x": "000101010010101",
    "y": "00010111100111",
    "z": "000111001100111",
    "A": "111101111101101",
    "B": "111101110101111",
    "C": "011100100100011",
    "D": "110101101101111",
    "E": "111100110100111",
    "F": "1111001101001",
    "G": "011100100101111",
    "H": "101101111101101",
    "I": "111010010010111",
    "J": "11101001001011",
    "K": "101101110101101",
    "L": "100100100100111",
    "M": "111111101101101",
    "N": "110101101101101",
    "O": "01110110110111",
    "P": "1111011111001",
    "Q": "010101101110011",
    "R": "111101110101101",
    "S": "01110011100111",
    "T": "11101001001001",
    "U": "101101101101011",
    "V": "10110110111101",
    "W": "101101101111111",
    "X": "101101010101101",
    "Y": "101101111001111",
    "Z": "111001010100111",
    "!": "01001001000001",
    "'": "0101",
    "(": "01010010010001",
    ")": "01000100100101",
    "+": "00001011101",
    ",": "0000000000101",
    "-": "000000111",
    "<": "001010100010001",
    "=": "000111000111",
    ">": "1000100010101",
    "?": "11100101100001",
    "[": "11010010010011",
    "]": "011001001001011",
    "^": "010101",
    "_": "000000000000111",
    ":": "000010000010",
    ";": "0000100000101",
    ".": "00000000000001",
    "/": "0010100100101",
    "{": "011010110010011",
    "|": "01001001001001",
    "}": "11001001101011",
    "~": "0000011111",
    "$": "11111001111101",
    "@": "010101101100011",
    "%": "101001010100101",
    " ": "000000000000000",
}

_GLYPHS = MappingProxyType({ch: tuple(int(bit) for bit in bits) for ch, bits in _GLYPH_BITS.items()})


def retrieve_glyph(character: str) -> tuple[int, ...] | None:
    return _GLYPHS.get(character)


def supported_characters() -> frozenset[str]:
    return frozenset(_GLYPHS)


def is_supported(character: str) -> bool:
    return character in _GLYPHS

"""Test utility functions."""

import math


def card(image):
    """Pads a card image to 80 characters."""

    return image.ljust(80)


def header_block(*images):
    """
    Builds raw header bytes from card images: an END card is added and the
    result is padded with blank cards to a whole 2880 byte block.
    """

    cards = [card(image) for image in images] + [card('END')]
    nblocks = int(math.ceil(len(cards) / 36.0))
    text = ''.join(cards).ljust(nblocks * 2880)
    return text.encode('ascii')


def pad_block(data):
    """Pads data bytes with zeros to a whole 2880 byte block."""

    return data + b'\0' * ((2880 - len(data) % 2880) % 2880)

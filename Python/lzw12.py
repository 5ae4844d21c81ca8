# Bradford Arrington 2025
import io
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, List, Optional

from bitio import CompressorBitio


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


@dataclass(frozen=True)
class LzwConfig:
    bits: int = 12
    table_size: int = 5021
    hashing_shift: int = 4
    first_code: int = field(default=256, init=False)

    def __post_init__(self):
        if not 9 <= self.bits <= CompressorBitio.ACCUMULATOR_BITS - 7:
            raise ValueError(f"bits must be between 9 and "
                             f"{CompressorBitio.ACCUMULATOR_BITS - 7}, got {self.bits}")
        if self.hashing_shift < 0:
            raise ValueError(f"hashing_shift must not be negative, got {self.hashing_shift}")
        if not _is_prime(self.table_size):
            raise ValueError(f"table_size must be prime, got {self.table_size}")
        if self.table_size <= self.max_code:
            raise ValueError(f"table_size {self.table_size} must exceed max_code {self.max_code}")

    @property
    def max_value(self) -> int:
        """End of stream code."""
        return (1 << self.bits) - 1

    @property
    def max_code(self) -> int:
        return self.max_value - 1


DEFAULT_CONFIG = LzwConfig()


@dataclass(frozen=True)
class DictionaryEntry:
    parent_code: int
    character: int
    code_value: int


class DictionaryTable:
    """
    Open addressed (prefix code, character) -> code table.

    A slot holding None is empty, so no code value doubles as the empty marker.
    """

    def __init__(self, config: LzwConfig = DEFAULT_CONFIG):
        self.config = config
        self.slots: List[Optional[DictionaryEntry]] = [None] * config.table_size
        self.count: int = 0

    def __len__(self) -> int:
        return self.count

    def hash_index(self, parent_code: int, child_character: int) -> int:
        index = (child_character << self.config.hashing_shift) ^ parent_code
        return index % self.config.table_size

    def lookup_or_reserve(self, parent_code: int, child_character: int) -> int:
        """
        Find the table location for a string/character combination.
        Returns the slot holding the match, or the first empty slot on the probe
        sequence; check is_unused() on the result to tell the two apart.
        """
        table_size = self.config.table_size
        index = self.hash_index(parent_code, child_character)
        offset = 1 if index == 0 else table_size - index

        for _ in range(table_size):
            entry = self.slots[index]
            if entry is None:
                return index
            if entry.parent_code == parent_code and entry.character == child_character:
                return index
            index -= offset
            if index < 0:
                index += table_size

        raise RuntimeError(f"Dictionary table full: no slot for ({parent_code}, {child_character})")

    def is_unused(self, index: int) -> bool:
        return self.slots[index] is None

    def code_at(self, index: int) -> int:
        entry = self.slots[index]
        if entry is None:
            raise KeyError(f"Slot {index} is empty")
        return entry.code_value

    def store(self, index: int, parent_code: int, child_character: int, code_value: int):
        if self.slots[index] is not None:
            raise ValueError(f"Slot {index} already holds code {self.slots[index].code_value}")
        self.slots[index] = DictionaryEntry(parent_code, child_character, code_value)
        self.count += 1

    def find(self, parent_code: int, child_character: int) -> Optional[int]:
        index = self.lookup_or_reserve(parent_code, child_character)
        if self.is_unused(index):
            return None
        return self.code_at(index)


class EncoderState(Enum):
    START = "start"
    RUNNING = "running"
    FLUSHING = "flushing"
    DONE = "done"


class Compressor:
    COMPRESSION_NAME = "LZW 12 Bit Encoder"
    USAGE = "in-file out-file\n\n"

    def __init__(self, config: LzwConfig = DEFAULT_CONFIG):
        self.config = config
        self.table = DictionaryTable(config)
        self.state = EncoderState.START
        self.next_code: int = config.first_code
        self.bytes_read: int = 0
        self.codes_emitted: int = 0

    @property
    def dictionary_full(self) -> bool:
        return self.next_code > self.config.max_code

    def _reset(self):
        self.table = DictionaryTable(self.config)
        self.state = EncoderState.START
        self.next_code = self.config.first_code
        self.bytes_read = 0
        self.codes_emitted = 0

    def _output_code(self, output: CompressorBitio.BitFile, code: int):
        output.output_code(code)
        self.codes_emitted += 1

    def compress_file(self, input_stream: BinaryIO, output: CompressorBitio.BitFile,
                      argc: int = 0, argv: Optional[List[str]] = None):
        if output.bits != self.config.bits:
            raise ValueError(f"Bit file packs {output.bits} bit codes, encoder uses {self.config.bits}")
        self._reset()

        first_byte = input_stream.read(1)
        if first_byte:
            self.bytes_read += 1
            string_code: int = first_byte[0]
            self.state = EncoderState.RUNNING

            while True:
                char_byte = input_stream.read(1)
                if not char_byte:  # EOF
                    break
                self.bytes_read += 1
                character: int = char_byte[0]

                index = self.table.lookup_or_reserve(string_code, character)
                if not self.table.is_unused(index):
                    string_code = self.table.code_at(index)
                    continue

                self._output_code(output, string_code)
                if self.next_code <= self.config.max_code:
                    self.table.store(index, string_code, character, self.next_code)
                    self.next_code += 1
                string_code = character

            # Write the last string
            self._output_code(output, string_code)

        # empty input still gets the end-of-stream marker
        self._output_code(output, self.config.max_value)
        self.state = EncoderState.FLUSHING
        output.flush()
        self.state = EncoderState.DONE

        argv = argv or []
        while argc > 0:
            argc -= 1
            print(f"Unknown argument: {argv[len(argv) - argc - 1]}")

    def compress(self, data: bytes) -> bytes:
        sink = io.BytesIO()
        self.compress_file(io.BytesIO(data), CompressorBitio.BitFile(sink, self.config.bits))
        return sink.getvalue()

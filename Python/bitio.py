# Bradford Arrington 2025
import sys
from typing import BinaryIO, Optional


class CompressorBitio:
    PACIFIER_COUNT = 2047
    ACCUMULATOR_BITS = 32
    ACCUMULATOR_MASK = (1 << ACCUMULATOR_BITS) - 1

    class BitFile:
        """
        MSB-first bit packer for fixed width codes.

        Codes are left-justified into a 32 bit accumulator at the current
        pending bit offset; whole bytes are drained off the top as soon as
        eight or more bits are pending.
        """

        def __init__(self, file_stream: BinaryIO, bits: int = 12, pacifier: bool = False,
                     owns_stream: bool = False):
            if not 1 <= bits <= CompressorBitio.ACCUMULATOR_BITS - 7:
                raise ValueError(f"Code width must be between 1 and "
                                 f"{CompressorBitio.ACCUMULATOR_BITS - 7} bits, got {bits}")
            self.file_stream: BinaryIO = file_stream
            self.bits: int = bits
            self.pacifier: bool = pacifier
            self.owns_stream: bool = owns_stream
            self.pacifier_counter: int = 0
            self.bytes_written: int = 0
            self._buffer: int = 0
            self._bit_count: int = 0

        @staticmethod
        def open_output_bit_file(name: str, bits: int = 12,
                                 pacifier: bool = True) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(open(name, "wb"), bits, pacifier, owns_stream=True)

        @property
        def pending_bits(self) -> int:
            return self._bit_count

        @property
        def accumulator(self) -> int:
            return self._buffer

        def push_bits(self, value: int, count: int):
            """Place the low `count` bits of value just below the pending bits."""
            if count < 0 or self._bit_count + count > CompressorBitio.ACCUMULATOR_BITS:
                raise ValueError(f"Cannot push {count} bits with {self._bit_count} pending")
            value &= (1 << count) - 1
            shift = CompressorBitio.ACCUMULATOR_BITS - count - self._bit_count
            self._buffer |= value << shift
            self._bit_count += count

        def drain_byte(self) -> int:
            """Remove the top byte of the accumulator and write it to the sink."""
            byte = (self._buffer >> (CompressorBitio.ACCUMULATOR_BITS - 8)) & 0xFF
            self._write_byte(byte)
            self._buffer = (self._buffer << 8) & CompressorBitio.ACCUMULATOR_MASK
            self._bit_count = max(self._bit_count - 8, 0)
            return byte

        def output_code(self, code: int):
            if not 0 <= code < (1 << self.bits):
                raise ValueError(f"Code {code} does not fit in {self.bits} bits")
            self.push_bits(code, self.bits)
            while self._bit_count >= 8:
                self.drain_byte()

        def flush(self):
            # final partial byte goes out zero padded on the low end
            while self._bit_count > 0:
                self.drain_byte()
            try:
                self.file_stream.flush()
            except IOError as e:
                raise IOError(f"Fatal error in Flush! {e}") from e

        def close_bit_file(self):
            self.flush()
            if self.owns_stream:
                self.file_stream.close()

        def _write_byte(self, byte: int):
            try:
                self.file_stream.write(bytes([byte]))
            except IOError as e:
                raise IOError(f"Fatal error in OutputBit! {e}") from e
            self.bytes_written += 1
            self.pacifier_counter += 1
            if self.pacifier and (self.pacifier_counter & CompressorBitio.PACIFIER_COUNT) == 0:
                sys.stdout.write(".")
                sys.stdout.flush()

        def __enter__(self) -> 'CompressorBitio.BitFile':
            return self

        def __exit__(self, exc_type, exc_value, traceback) -> Optional[bool]:
            if exc_type is None:
                self.close_bit_file()
            elif self.owns_stream:
                self.file_stream.close()
            return None

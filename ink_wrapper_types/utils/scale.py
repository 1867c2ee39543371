"""
SCALE codec: the platform's compact binary encoding.

Call payloads arrive pre-encoded, so this module is only needed to *decode*
return values and events (and, for tests and local simulation, to encode
them). Codecs are small immutable objects describing a type's layout:

    >>> from ink_wrapper_types.utils import scale
    >>> scale.Vec(scale.u32).encode([1, 2])
    b'\\x08\\x01\\x00\\x00\\x00\\x02\\x00\\x00\\x00'
    >>> scale.message_result(scale.bool_).decode(b"\\x00\\x01")
    Ok(value=True)

Layout rules
------------
- fixed-width integers: little-endian two's complement
- bool: one byte, 0 or 1
- compact: 2-bit mode prefix (single byte, two byte, four byte, big-integer);
  only the shortest form is accepted on decode
- Vec<T>, String, Vec<u8>: compact length prefix followed by the items
- Option<T>: 0x00 for None, 0x01 followed by T
- Result<T, E>: 0x00 followed by T, 0x01 followed by E
- tuples/structs: fields concatenated in order, no prefix
- enums: one index byte followed by the variant's fields
- fixed arrays [T; N]: N items, no prefix

Decoding never raises anything other than `DecodeError` for malformed input.
`decode()` leaves trailing bytes unread, matching the platform's decode;
`decode_all()` rejects them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import (Any, Callable, Dict, Generic, List, Mapping, Optional,
                    Sequence, Tuple, Type, TypeVar, Union)

from ..errors import DecodeError, EncodeError, LangError
from ..types.core import ACCOUNT_ID_LEN, AccountId
from .bytes import BytesLike

T = TypeVar("T")
E = TypeVar("E")

# -----------------------------------------------------------------------------
# Reader
# -----------------------------------------------------------------------------


# Zero-size items (`()`, `[T;0]`, empty tuples) consume no input, so their
# count is bounded separately: at most one per input byte plus this slack.
ZERO_SIZE_ITEM_SLACK = 1024


class ScaleReader:
    """Cursor over an immutable byte buffer."""

    __slots__ = ("_buf", "_pos", "_zero_size_budget")

    def __init__(self, data: BytesLike) -> None:
        self._buf = bytes(data)
        self._pos = 0
        self._zero_size_budget = len(self._buf) + ZERO_SIZE_ITEM_SLACK

    @property
    def offset(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def read(self, n: int, type_name: Optional[str] = None) -> bytes:
        if n > self.remaining:
            raise DecodeError(
                f"not enough data: need {n} byte(s), have {self.remaining}",
                type_name=type_name,
                offset=self._pos,
            )
        out = self._buf[self._pos : self._pos + n]
        self._pos += n
        return out

    def read_byte(self, type_name: Optional[str] = None) -> int:
        return self.read(1, type_name)[0]

    def reserve_zero_size(self, n: int, type_name: Optional[str] = None) -> None:
        """Account for `n` zero-size items about to be decoded."""
        if n > self._zero_size_budget:
            raise DecodeError(
                f"{n} zero-size items exceed the allowance for {len(self._buf)} input bytes",
                type_name=type_name,
                offset=self._pos,
            )
        self._zero_size_budget -= n


# -----------------------------------------------------------------------------
# Decoded value shapes
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    value: E

    @property
    def is_ok(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Variant:
    """A decoded enum value: the variant name plus its (optional) payload."""

    name: str
    value: Any = None


# -----------------------------------------------------------------------------
# Codec base
# -----------------------------------------------------------------------------


class Codec(Generic[T]):
    """Describes how one type is laid out in SCALE."""

    type_name: str = "?"
    min_size: int = 0

    def encode_into(self, value: T, out: bytearray) -> None:
        raise NotImplementedError

    def decode_from(self, reader: ScaleReader) -> T:
        raise NotImplementedError

    def encode(self, value: T) -> bytes:
        out = bytearray()
        self.encode_into(value, out)
        return bytes(out)

    def decode(self, data: BytesLike) -> T:
        return self.decode_from(ScaleReader(data))

    def decode_all(self, data: BytesLike) -> T:
        reader = ScaleReader(data)
        value = self.decode_from(reader)
        if reader.remaining:
            raise DecodeError(
                f"{reader.remaining} trailing byte(s) after value",
                type_name=self.type_name,
                offset=reader.offset,
            )
        return value

    def __repr__(self) -> str:
        return f"<codec {self.type_name}>"


# -----------------------------------------------------------------------------
# Scalars
# -----------------------------------------------------------------------------


class UInt(Codec[int]):
    def __init__(self, bits: int) -> None:
        if bits not in (8, 16, 32, 64, 128, 256):
            raise ValueError(f"unsupported integer width: {bits}")
        self.bits = bits
        self.min_size = bits // 8
        self.type_name = f"u{bits}"

    def encode_into(self, value: int, out: bytearray) -> None:
        if not isinstance(value, int) or not (0 <= value < (1 << self.bits)):
            raise EncodeError(f"{value!r} is out of range for {self.type_name}")
        out += int(value).to_bytes(self.min_size, "little")

    def decode_from(self, reader: ScaleReader) -> int:
        return int.from_bytes(reader.read(self.min_size, self.type_name), "little")


class Int(Codec[int]):
    def __init__(self, bits: int) -> None:
        if bits not in (8, 16, 32, 64, 128, 256):
            raise ValueError(f"unsupported integer width: {bits}")
        self.bits = bits
        self.min_size = bits // 8
        self.type_name = f"i{bits}"

    def encode_into(self, value: int, out: bytearray) -> None:
        bound = 1 << (self.bits - 1)
        if not isinstance(value, int) or not (-bound <= value < bound):
            raise EncodeError(f"{value!r} is out of range for {self.type_name}")
        out += int(value).to_bytes(self.min_size, "little", signed=True)

    def decode_from(self, reader: ScaleReader) -> int:
        raw = reader.read(self.min_size, self.type_name)
        return int.from_bytes(raw, "little", signed=True)


class Bool(Codec[bool]):
    type_name = "bool"
    min_size = 1

    def encode_into(self, value: bool, out: bytearray) -> None:
        out.append(1 if value else 0)

    def decode_from(self, reader: ScaleReader) -> bool:
        pos = reader.offset
        b = reader.read_byte(self.type_name)
        if b > 1:
            raise DecodeError(f"invalid bool byte 0x{b:02x}", type_name=self.type_name, offset=pos)
        return b == 1


class Compact(Codec[int]):
    """
    Variable-length unsigned integer. `bits` bounds the decoded value when the
    compact wraps a fixed-width type (e.g. `Compact<u32>`).
    """

    min_size = 1

    def __init__(self, bits: Optional[int] = None) -> None:
        self.bits = bits
        self.type_name = f"Compact<u{bits}>" if bits else "Compact"

    def encode_into(self, value: int, out: bytearray) -> None:
        if not isinstance(value, int) or value < 0:
            raise EncodeError(f"{value!r} cannot be compact-encoded")
        if self.bits is not None and value >= (1 << self.bits):
            raise EncodeError(f"{value!r} is out of range for {self.type_name}")
        if value < 1 << 6:
            out.append(value << 2)
        elif value < 1 << 14:
            out += ((value << 2) | 0b01).to_bytes(2, "little")
        elif value < 1 << 30:
            out += ((value << 2) | 0b10).to_bytes(4, "little")
        else:
            n = (value.bit_length() + 7) // 8
            if n > 67:
                raise EncodeError(f"{value!r} is too large for compact encoding")
            out.append(((n - 4) << 2) | 0b11)
            out += value.to_bytes(n, "little")

    def decode_from(self, reader: ScaleReader) -> int:
        pos = reader.offset
        first = reader.read_byte(self.type_name)
        mode = first & 0b11
        if mode == 0b00:
            value = first >> 2
        elif mode == 0b01:
            value = int.from_bytes(bytes([first]) + reader.read(1, self.type_name), "little") >> 2
            if value < 1 << 6:
                raise DecodeError("non-canonical compact (two-byte mode)", self.type_name, pos)
        elif mode == 0b10:
            value = int.from_bytes(bytes([first]) + reader.read(3, self.type_name), "little") >> 2
            if value < 1 << 14:
                raise DecodeError("non-canonical compact (four-byte mode)", self.type_name, pos)
        else:
            n = (first >> 2) + 4
            value = int.from_bytes(reader.read(n, self.type_name), "little")
            if value < 1 << 30 or (n > 4 and value >> (8 * (n - 1)) == 0):
                raise DecodeError("non-canonical compact (big-integer mode)", self.type_name, pos)
        if self.bits is not None and value >= (1 << self.bits):
            raise DecodeError(f"compact value exceeds u{self.bits}", self.type_name, pos)
        return value


class Unit(Codec[None]):
    type_name = "()"
    min_size = 0

    def encode_into(self, value: None, out: bytearray) -> None:
        return None

    def decode_from(self, reader: ScaleReader) -> None:
        return None


class _Length:
    """Compact length prefix shared by String, Vec<u8> and Vec<T>."""

    _compact = Compact(32)

    @classmethod
    def encode_into(cls, n: int, out: bytearray) -> None:
        cls._compact.encode_into(n, out)

    @classmethod
    def decode_from(cls, reader: ScaleReader, type_name: str) -> int:
        pos = reader.offset
        try:
            return cls._compact.decode_from(reader)
        except DecodeError as e:
            raise DecodeError(f"bad length prefix: {e.message}", type_name, pos) from e


class Bytes(Codec[bytes]):
    """`Vec<u8>`: compact length followed by raw bytes."""

    type_name = "Vec<u8>"
    min_size = 1

    def encode_into(self, value: BytesLike, out: bytearray) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"{type(value)!r} is not bytes-like")
        raw = bytes(value)
        _Length.encode_into(len(raw), out)
        out += raw

    def decode_from(self, reader: ScaleReader) -> bytes:
        n = _Length.decode_from(reader, self.type_name)
        return reader.read(n, self.type_name)


class Str(Codec[str]):
    type_name = "String"
    min_size = 1

    def encode_into(self, value: str, out: bytearray) -> None:
        if not isinstance(value, str):
            raise EncodeError(f"{type(value)!r} is not a str")
        raw = value.encode("utf-8")
        _Length.encode_into(len(raw), out)
        out += raw

    def decode_from(self, reader: ScaleReader) -> str:
        n = _Length.decode_from(reader, self.type_name)
        pos = reader.offset
        raw = reader.read(n, self.type_name)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid utf-8: {e.reason}", self.type_name, pos) from e


class FixedBytes(Codec[bytes]):
    """`[u8; N]`: exactly N raw bytes, no prefix."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("fixed byte array size must be non-negative")
        self.min_size = size
        self.type_name = f"[u8;{size}]"

    def encode_into(self, value: BytesLike, out: bytearray) -> None:
        raw = bytes(value)
        if len(raw) != self.min_size:
            raise EncodeError(f"expected {self.min_size} bytes, got {len(raw)}")
        out += raw

    def decode_from(self, reader: ScaleReader) -> bytes:
        return reader.read(self.min_size, self.type_name)


class AccountIdCodec(Codec[AccountId]):
    type_name = "AccountId"
    min_size = ACCOUNT_ID_LEN

    def encode_into(self, value: AccountId, out: bytearray) -> None:
        out += AccountId.coerce(value).raw

    def decode_from(self, reader: ScaleReader) -> AccountId:
        return AccountId(reader.read(ACCOUNT_ID_LEN, self.type_name))


# -----------------------------------------------------------------------------
# Composites
# -----------------------------------------------------------------------------


class Vec(Codec[List[T]]):
    min_size = 1

    def __init__(self, inner: Codec[T]) -> None:
        self.inner = inner
        self.type_name = f"Vec<{inner.type_name}>"

    def encode_into(self, value: Sequence[T], out: bytearray) -> None:
        items = list(value)
        _Length.encode_into(len(items), out)
        for item in items:
            self.inner.encode_into(item, out)

    def decode_from(self, reader: ScaleReader) -> List[T]:
        pos = reader.offset
        n = _Length.decode_from(reader, self.type_name)
        if self.inner.min_size == 0:
            reader.reserve_zero_size(n, self.type_name)
        elif n * self.inner.min_size > reader.remaining:
            raise DecodeError(
                f"length prefix {n} exceeds remaining input ({reader.remaining} bytes)",
                self.type_name,
                pos,
            )
        return [self.inner.decode_from(reader) for _ in range(n)]


class Array(Codec[List[T]]):
    def __init__(self, inner: Codec[T], size: int) -> None:
        if size < 0:
            raise ValueError("array size must be non-negative")
        self.inner = inner
        self.size = size
        self.min_size = inner.min_size * size
        self.type_name = f"[{inner.type_name};{size}]"

    def encode_into(self, value: Sequence[T], out: bytearray) -> None:
        items = list(value)
        if len(items) != self.size:
            raise EncodeError(f"expected {self.size} items, got {len(items)}")
        for item in items:
            self.inner.encode_into(item, out)

    def decode_from(self, reader: ScaleReader) -> List[T]:
        return [self.inner.decode_from(reader) for _ in range(self.size)]


class Option(Codec[Optional[T]]):
    min_size = 1

    def __init__(self, inner: Codec[T]) -> None:
        self.inner = inner
        self.type_name = f"Option<{inner.type_name}>"

    def encode_into(self, value: Optional[T], out: bytearray) -> None:
        if value is None:
            out.append(0)
        else:
            out.append(1)
            self.inner.encode_into(value, out)

    def decode_from(self, reader: ScaleReader) -> Optional[T]:
        pos = reader.offset
        tag = reader.read_byte(self.type_name)
        if tag == 0:
            return None
        if tag == 1:
            return self.inner.decode_from(reader)
        raise DecodeError(f"invalid Option tag 0x{tag:02x}", self.type_name, pos)


class Result(Codec[Union[Ok[T], Err[E]]]):
    min_size = 1

    def __init__(self, ok: Codec[T], err: Codec[E], type_name: Optional[str] = None) -> None:
        self.ok = ok
        self.err = err
        self.type_name = type_name or f"Result<{ok.type_name},{err.type_name}>"

    def encode_into(self, value: Union[Ok[T], Err[E]], out: bytearray) -> None:
        if isinstance(value, Ok):
            out.append(0)
            self.ok.encode_into(value.value, out)
        elif isinstance(value, Err):
            out.append(1)
            self.err.encode_into(value.value, out)
        else:
            raise EncodeError(f"{self.type_name} expects Ok(...) or Err(...), got {value!r}")

    def decode_from(self, reader: ScaleReader) -> Union[Ok[T], Err[E]]:
        pos = reader.offset
        tag = reader.read_byte(self.type_name)
        if tag == 0:
            return Ok(self.ok.decode_from(reader))
        if tag == 1:
            return Err(self.err.decode_from(reader))
        raise DecodeError(f"invalid Result tag 0x{tag:02x}", self.type_name, pos)


class Tuple_(Codec[Tuple[Any, ...]]):
    def __init__(self, *items: Codec[Any]) -> None:
        self.items = items
        self.min_size = sum(c.min_size for c in items)
        self.type_name = "(" + ",".join(c.type_name for c in items) + ")"

    def encode_into(self, value: Sequence[Any], out: bytearray) -> None:
        values = tuple(value)
        if len(values) != len(self.items):
            raise EncodeError(f"{self.type_name} expects {len(self.items)} items, got {len(values)}")
        for codec, item in zip(self.items, values):
            codec.encode_into(item, out)

    def decode_from(self, reader: ScaleReader) -> Tuple[Any, ...]:
        return tuple(codec.decode_from(reader) for codec in self.items)


class Struct(Codec[T]):
    """
    Named fields concatenated in order. Decoding calls `factory(**fields)`;
    encoding reads fields by attribute (or by key for mappings).
    """

    def __init__(
        self,
        factory: Callable[..., T],
        fields: Sequence[Tuple[str, Codec[Any]]],
        type_name: Optional[str] = None,
    ) -> None:
        self.factory = factory
        self.fields = tuple(fields)
        self.min_size = sum(c.min_size for _, c in self.fields)
        self.type_name = type_name or getattr(factory, "__name__", "Struct")

    def encode_into(self, value: T, out: bytearray) -> None:
        for name, codec in self.fields:
            if isinstance(value, Mapping):
                field_value = value[name]
            else:
                field_value = getattr(value, name)
            codec.encode_into(field_value, out)

    def decode_from(self, reader: ScaleReader) -> T:
        pos = reader.offset
        kwargs = {name: codec.decode_from(reader) for name, codec in self.fields}
        try:
            return self.factory(**kwargs)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"cannot build {self.type_name}: {e}", self.type_name, pos) from e


class Enum(Codec[Variant]):
    """
    Indexed variants. `variants` maps names to payload codecs (None for unit
    variants); indexes follow declaration order unless `indices` overrides them.
    """

    min_size = 1

    def __init__(
        self,
        variants: Union[Mapping[str, Optional[Codec[Any]]], Sequence[Tuple[str, Optional[Codec[Any]]]]],
        *,
        indices: Optional[Mapping[str, int]] = None,
        type_name: str = "Enum",
    ) -> None:
        pairs = list(variants.items()) if isinstance(variants, Mapping) else list(variants)
        self.type_name = type_name
        self._by_name: Dict[str, Tuple[int, Optional[Codec[Any]]]] = {}
        self._by_index: Dict[int, Tuple[str, Optional[Codec[Any]]]] = {}
        for pos, (name, codec) in enumerate(pairs):
            index = (indices or {}).get(name, pos)
            if not (0 <= index <= 0xFF):
                raise ValueError(f"variant index out of range: {name}={index}")
            if index in self._by_index or name in self._by_name:
                raise ValueError(f"duplicate enum variant: {name} (index {index})")
            self._by_name[name] = (index, codec)
            self._by_index[index] = (name, codec)

    @property
    def variant_names(self) -> List[str]:
        return [self._by_index[i][0] for i in sorted(self._by_index)]

    def encode_into(self, value: Variant, out: bytearray) -> None:
        if not isinstance(value, Variant) or value.name not in self._by_name:
            raise EncodeError(f"{self.type_name} cannot encode {value!r}")
        index, codec = self._by_name[value.name]
        out.append(index)
        if codec is not None:
            codec.encode_into(value.value, out)

    def decode_from(self, reader: ScaleReader) -> Variant:
        pos = reader.offset
        index = reader.read_byte(self.type_name)
        if index not in self._by_index:
            raise DecodeError(f"unknown variant index {index}", self.type_name, pos)
        name, codec = self._by_index[index]
        return Variant(name, codec.decode_from(reader) if codec is not None else None)


class IntEnumCodec(Codec[IntEnum]):
    """Unit-only enum mapped onto an `IntEnum`; the member value is the index byte."""

    min_size = 1

    def __init__(self, enum_cls: Type[IntEnum], type_name: Optional[str] = None) -> None:
        self.enum_cls = enum_cls
        self.type_name = type_name or enum_cls.__name__

    def encode_into(self, value: IntEnum, out: bytearray) -> None:
        try:
            member = self.enum_cls(value)
        except ValueError as e:
            raise EncodeError(f"{value!r} is not a {self.type_name}") from e
        out.append(int(member))

    def decode_from(self, reader: ScaleReader) -> IntEnum:
        pos = reader.offset
        index = reader.read_byte(self.type_name)
        try:
            return self.enum_cls(index)
        except ValueError as e:
            raise DecodeError(f"unknown variant index {index}", self.type_name, pos) from e


# -----------------------------------------------------------------------------
# Ready-made codecs
# -----------------------------------------------------------------------------

u8 = UInt(8)
u16 = UInt(16)
u32 = UInt(32)
u64 = UInt(64)
u128 = UInt(128)
u256 = UInt(256)
i8 = Int(8)
i16 = Int(16)
i32 = Int(32)
i64 = Int(64)
i128 = Int(128)
i256 = Int(256)
bool_ = Bool()
compact = Compact()
unit = Unit()
str_ = Str()
bytes_ = Bytes()
account_id = AccountIdCodec()
hash_ = FixedBytes(32)
lang_error = IntEnumCodec(LangError)


def message_result(inner: Codec[T]) -> Result[T, LangError]:
    """`Result<T, LangError>`: the envelope every message and constructor returns."""
    return Result(inner, lang_error, type_name=f"MessageResult<{inner.type_name}>")


# -----------------------------------------------------------------------------
# Type expressions
# -----------------------------------------------------------------------------

_NAMED: Dict[str, Codec[Any]] = {
    "u8": u8,
    "u16": u16,
    "u32": u32,
    "u64": u64,
    "u128": u128,
    "u256": u256,
    "i8": i8,
    "i16": i16,
    "i32": i32,
    "i64": i64,
    "i128": i128,
    "i256": i256,
    "bool": bool_,
    "str": str_,
    "String": str_,
    "()": unit,
    "AccountId": account_id,
    "Hash": hash_,
    "LangError": lang_error,
}

_GENERIC_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)<(.*)>$")
_OPEN = "<(["
_CLOSE = ">)]"


def _split_top_level(s: str, sep: str) -> List[str]:
    """Split on `sep` but ignore separators nested inside <>, () or []."""
    out: List[str] = []
    depth = 0
    buf: List[str] = []
    for ch in s:
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            depth -= 1
            if depth < 0:
                raise ValueError(f"unbalanced brackets in type expression: {s!r}")
        if ch == sep and depth == 0:
            out.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    if depth != 0:
        raise ValueError(f"unbalanced brackets in type expression: {s!r}")
    out.append("".join(buf))
    return out


def _parse(s: str) -> Codec[Any]:
    if s in _NAMED:
        return _NAMED[s]

    m = _GENERIC_RE.match(s)
    if m:
        name, inner = m.groups()
        args = [_parse(a) for a in _split_top_level(inner, ",")]
        if name == "Vec" and len(args) == 1:
            return bytes_ if args[0] is u8 else Vec(args[0])
        if name == "Option" and len(args) == 1:
            return Option(args[0])
        if name == "Result" and len(args) == 2:
            return Result(args[0], args[1])
        if name == "MessageResult" and len(args) == 1:
            return message_result(args[0])
        if name == "Compact" and len(args) == 1 and isinstance(args[0], UInt):
            return Compact(args[0].bits)
        raise ValueError(f"unsupported generic type: {s!r}")

    if s.startswith("[") and s.endswith("]"):
        parts = _split_top_level(s[1:-1], ";")
        if len(parts) != 2 or not parts[1].isdigit():
            raise ValueError(f"malformed array type: {s!r}")
        elem, size = _parse(parts[0]), int(parts[1])
        return FixedBytes(size) if elem is u8 else Array(elem, size)

    if s.startswith("(") and s.endswith(")"):
        inner = s[1:-1]
        elems = [e for e in _split_top_level(inner, ",") if e]
        return Tuple_(*(_parse(e) for e in elems))

    raise ValueError(f"unsupported type: {s!r}")


def parse_type(expr: str) -> Codec[Any]:
    """
    Build a codec from a Rust-like type expression, e.g. `Vec<u8>`,
    `Option<u32>`, `Result<u128,LangError>`, `[u8;32]`, `(AccountId,bool)`.
    """
    s = re.sub(r"\s+", "", expr)
    if not s:
        raise ValueError("empty type expression")
    return _parse(s)


__all__ = [
    "ScaleReader",
    "Ok",
    "Err",
    "Variant",
    "Codec",
    "UInt",
    "Int",
    "Bool",
    "Compact",
    "Unit",
    "Bytes",
    "Str",
    "FixedBytes",
    "AccountIdCodec",
    "Vec",
    "Array",
    "Option",
    "Result",
    "Tuple_",
    "Struct",
    "Enum",
    "IntEnumCodec",
    "u8", "u16", "u32", "u64", "u128", "u256",
    "i8", "i16", "i32", "i64", "i128", "i256",
    "bool_", "compact", "unit", "str_", "bytes_",
    "account_id", "hash_", "lang_error",
    "message_result",
    "parse_type",
]

# gnbcore

Building blocks for an overlay networking daemon, in plain Python with no
third-party dependencies.

## What is inside

- `gnbcore.alloc`: `Heap(max_fragment)` hands out zeroed `bytearray` blocks
  with `alloc(size)`, takes them back with `free(block)` and drops them all with
  `clean()`. It tracks `alloc_byte` and `ralloc_byte` (payload plus an 8-byte
  header per block), and raises `HeapFullError` once `max_fragment` blocks are
  held. `len(heap)` is the number of blocks held.
- `gnbcore.fixed_pool`: `FixedPool(array_len, bsize)` is a stack of zeroed
  blocks. `pop()` returns a block or `None` when empty; `push(block)` returns
  it and gives the new count, raising `ValueError` when the pool is full.
- `gnbcore.fixed_list`: `FixedList(size)` stores up to `size` items in
  `FixedListNode` slots. `push(udata)` returns the node (raising `IndexError`
  when full). `pop(node)` removes a node in constant time by moving the last
  node into its place.
- `gnbcore.buf`: `ZBuf(size)` is a byte block with `start`, `end`, `pos` and
  `las` positions. `reset()` moves both cursors back to `start`.
- `gnbcore.doubly_linked_list`: `DoublyLinkedList` of `ListNode` objects.
  `add(node)` puts a node at the head. `pop_head()` and `pop_tail()` remove
  from either end. `move_head(node)` moves a node to the head, and lists of one
  or two nodes are left alone. `pop(node)` unlinks a node. Iteration runs from
  head to tail.
- `gnbcore.address`:
  - `Address` is a family, a port, packed host bytes and a last-seen `ts_sec`.
  - `AddressList(size)` keeps up to `size` addresses. `update(address)` stores
    a copy over a matching host, else over the first unused slot, else over the
    oldest entry. `find(address)` returns an index or `None`. `fifo3(address)`
    makes one address the only entry.
  - `SockAddress.ipv4` and `SockAddress.ipv6` build endpoints from a `Protocol`
    (`UDP` or `TCP`), a host (`None` means any address) and a port.
  - Text helpers: `address4_string`, `address6_string`, `socket4_string`,
    `socket6_string`, `sockaddress_string`, `ip_port_string`,
    `address4_from_string` and `hide_address_string`. With `addr_secure=True`
    they mask the first part of the address with `*`.
  - Other helpers: `cmp_sockaddr` returns 0 if equal, 1 if the ports differ and
    2 if the hosts differ. There are also `htonll`, `ntohll` and
    `get_netmask_class`.
- `gnbcore.log`: `LogContext` writes lines tagged `LogType.STD`, `DEBUG` or
  `ERROR`. Each line holds a timestamp and the `log_name` from the
  `LogConfig` registered for the log id.
  - Outputs are chosen with the `LogOutput` flags `STDOUT`, `FILE` and `UDP`.
  - `open_files(path)` appends to `std.log`, `debug.log` and `error.log`.
    `file_rotate()` archives them as `<name>_YYYY_MM_DD.log.arc` when the day
    of the month changes.
  - `udp_open()` aims at loopback port 9000. The target can be changed with
    `udp_set_addr4`, `udp_set_addr6` or `udp_set_addr4_string`.
  - `LogUdpType.BINARY` prefixes each datagram with a 4-byte header: length,
    payload type and log id.
  - `log`, `debug` and `error` only write when one of the id's levels is at or
    above the requested level.
  - `LogContext` is a context manager; `close()` releases files and sockets.

## Install

```
pip install .
```

## Examples

```python
from gnbcore.address import address4_from_string, ip_port_string

addr = address4_from_string("192.168.0.1:9001")
print(ip_port_string(addr, False))  # 192.168.0.1:9001
print(ip_port_string(addr, True))   # ***.168.0.1:9001
```

```python
from gnbcore.address import AddressList, address4_from_string

peers = AddressList(4)
idx = peers.update(address4_from_string("10.0.0.1:9001"))
print(idx, len(peers))  # 0 1
```

```python
from gnbcore.alloc import Heap

heap = Heap(4)
block = heap.alloc(16)
print(len(heap), heap.alloc_byte, heap.ralloc_byte)  # 1 16 24
heap.free(block)
```

```python
from gnbcore.log import LOG_LEVEL1, LogConfig, LogContext, LogOutput

with LogContext() as ctx:
    ctx.output_type = LogOutput.STDOUT
    ctx.config_table[1] = LogConfig("MAIN", console_level=LOG_LEVEL1)
    ctx.log(1, LOG_LEVEL1, "started on port %d\n", 9001)
```

Format strings use `%` formatting, and no newline is added to a line.

## What this package does not do

It is a set of data structures, address helpers and logging. It has:

- no event loop or socket polling;
- no hash map or hash function;
- no support for running as a background daemon or writing pid files;
- no command-line program.

The networking daemon itself, with its peers, tunnels and configuration, is
not part of it.

## Tests

```
pip install .[test]
pytest
```
"""Decoding of interrupt-mask register writes recorded during symbolic execution.

Critical sections in an RTIC application on the RP2040 are entered by
clearing interrupt enables (write to NVIC ICER) and left by setting them
again (write to NVIC ISER). The written value is the bit vector of the
interrupts being masked, which doubles as the label of the section.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List

import logging

from pathrta.models import Event

logger = logging.getLogger(__name__)

NVIC_ISER = 0xE000E100
NVIC_ICER = 0xE000E180


@dataclass(frozen=True)
class MemoryWrite:
    """A write to a hooked address.

    Attributes:
        address: Address written to.
        cycle: Cycle count when the write happened.
        value: Value written (the interrupt bit vector).
        instruction_cycles: Cycles of the writing instruction, which are only
            added to the cycle count once the instruction completes.
    """
    address: int
    cycle: int
    value: int
    instruction_cycles: int = 0


def event_from_write(write: MemoryWrite) -> Event:
    """Convert a lock or unlock write into an event.

    Raises:
        ValueError: If the write is not to NVIC_ICER or NVIC_ISER.
    """
    if write.address == NVIC_ICER:
        return Event(write.cycle, str(write.value))
    if write.address == NVIC_ISER:
        # the section only ends once the unlocking instruction has executed
        return Event(write.cycle + write.instruction_cycles, str(write.value))
    raise ValueError(f"Write to {write.address:#x} is not an interrupt mask write")


def events_from_writes(writes: Iterable[MemoryWrite]) -> List[Event]:
    """Convert hooked writes into chronological lock/unlock events.

    Writes to addresses other than the two mask registers are skipped.
    """
    events = []
    for write in writes:
        if write.address not in (NVIC_ICER, NVIC_ISER):
            logger.debug("Ignoring write to %#x", write.address)
            continue
        events.append(event_from_write(write))
    return events


class Rp2040Irq(IntEnum):
    TIMER_IRQ_0 = 0
    TIMER_IRQ_1 = 1
    TIMER_IRQ_2 = 2
    TIMER_IRQ_3 = 3
    PWM_IRQ_WRAP = 4
    USBCTRL_IRQ = 5
    XIP_IRQ = 6
    PIO0_IRQ_0 = 7
    PIO0_IRQ_1 = 8
    PIO1_IRQ_0 = 9
    PIO1_IRQ_1 = 10
    DMA_IRQ_0 = 11
    DMA_IRQ_1 = 12
    IO_IRQ_BANK0 = 13
    IO_IRQ_QSPI = 14
    SIO_IRQ_PROC0 = 15
    SIO_IRQ_PROC1 = 16
    CLOCKS_IRQ = 17
    SPI0_IRQ = 18
    SPI1_IRQ = 19
    UART0_IRQ = 20
    UART1_IRQ = 21
    ADC_IRQ_FIFO = 22
    I2C0_IRQ = 23
    I2C1_IRQ = 24
    RTC_IRQ = 25


def irqs_from_bit_vector(bit_vector: int) -> List[Rp2040Irq]:
    """Return the interrupts whose bits are set in a 32-bit mask value.

    Raises:
        ValueError: If a set bit has no RP2040 interrupt.
    """
    irqs = []
    for i in range(32):
        if bit_vector & (1 << i):
            irqs.append(Rp2040Irq(i))
    return irqs


def describe_label(label: str) -> str:
    """Name the interrupts masked by a section label, if it is a mask value."""
    if not label.isdigit():
        return label
    try:
        irqs = irqs_from_bit_vector(int(label))
    except ValueError:
        return label
    if not irqs:
        return label
    return "|".join(irq.name for irq in irqs)

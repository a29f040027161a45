"""XSM machine parts: words, registers, paged memory, disk, exceptions and simulator options."""
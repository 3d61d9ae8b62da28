"""Building blocks of the XSM machine: words, registers, paged memory and disk."""
"""Package data: the bundled ISBN range table (isbn-ranges.json).

Converted from the ISBN International RangeMessage.xml of 4 Jan 2026
(serial 6e5a8502-5e3f-4baa-9b1a-ff835dd18851). Bands the message leaves
unallocated are kept as length 0 rules, so every group covers all lookup
points from 0000000 to 9999999.
"""

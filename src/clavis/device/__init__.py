# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Input event stages
# host level:
# stage 0: host-specific; deliver key and touch events, or replay a recorded stream

# device level:
# stage 1: normalize key presses and touch gestures into integer codes
# stage 2: merge both code streams and feed them to the sequence matcher

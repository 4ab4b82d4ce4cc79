# This file is part of Falsify.
#
# Copyright the Falsify Authors.
# Individual contributors are listed in AUTHORS.rst and the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

# Notes: we use instances of these objects as singletons which serve as
# identifiers in various patches of code.


class UniqueIdentifier:
    def __init__(self, identifier):
        self.identifier = identifier

    def __repr__(self):
        return self.identifier


not_set = UniqueIdentifier("not_set")

# Returned by a transformer provider that has nothing to offer for the
# current state of a chain.
no_transformer = UniqueIdentifier("no_transformer")

# Stored in a chain's step slot once the chain has run out of transformers.
end_of_chain = UniqueIdentifier("end_of_chain")

#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-16
import pytest

# Header used by most checker/driver tests. `property` and `methodD` carry no
# annotation and sit outside any audited region.
NULLABILITY_HEADER = """\
#import <Foundation/Foundation.h>

@interface SomeClass : NSObject
- (nonnull id)methodA:(nullable SomeClass *)obj;
- (nonnull id)methodB:(nullable SomeClass *)obj;
- (nullable id)methodC;
- (id)methodD;
- (void)methodE:(nonnull SomeClass *)obj;
- (void)methodF:(nonnull SomeClass *)obj second:(nonnull SomeClass *)obj2;
- (void)methodG:(nullable SomeClass *)obj second:(nonnull SomeClass *)obj2;
+ (nullable instancetype)sharedInstance;
@property id property;
@property (nonnull) SomeClass *peer;
@property (readonly) int count;
@end

SomeClass * _Nullable makeSomeClass(void);
void consume(SomeClass * _Nonnull value);
"""


@pytest.fixture
def nullability_header() -> str:
	return NULLABILITY_HEADER

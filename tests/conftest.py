"""
Shared fixtures: an on-disk CDK packages tree with one stable and one alpha module.
"""

from pathlib import Path

import pytest


def write_file(p: Path, content: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
    return p


GENERATED_CLOUDFRONT = """
import * as cdk from '../../core';

export interface CfnDistributionProps {
  readonly enabled: boolean | cdk.IResolvable;
  readonly defaultCacheBehavior: CfnDistribution.DefaultCacheBehaviorProperty | cdk.IResolvable;
  readonly comment?: string;
}

export namespace CfnDistribution {
  export interface DefaultCacheBehaviorProperty {
    readonly targetOriginId: string;
    readonly viewerProtocolPolicy: string;
  }
}
"""

IMPLEMENTATION_CLOUDFRONT = """
import { Construct } from 'constructs';
import { CfnDistribution } from './cloudfront.generated';

export class Distribution extends Construct {
  constructor(scope: Construct, id: string) {
    super(scope, id);
    new CfnDistribution(this, 'Resource', {
      enabled: true,
      comment: 'hello',
      defaultCacheBehavior: { targetOriginId: 'x' },
    });
  }
}
"""


@pytest.fixture
def cdk_packages(tmp_path):
    """A minimal packages directory with one stable and one alpha module."""
    packages = tmp_path / "packages"
    stable = packages / "aws-cdk-lib" / "aws-cloudfront"
    write_file(stable / "lib" / "cloudfront.generated.ts", GENERATED_CLOUDFRONT)
    write_file(stable / "lib" / "distribution.ts", IMPLEMENTATION_CLOUDFRONT)
    write_file(stable / "test" / "distribution.test.ts", "new CfnDistribution(this, 'Resource', {});\n")

    alpha = packages / "@aws-cdk" / "aws-cloudfront-alpha"
    write_file(alpha / "lib" / "origin.ts", """
export class Thing {
  constructor() {
    new CfnDistribution(this, 'Resource', { enabled: true });
  }
}
""")
    return packages

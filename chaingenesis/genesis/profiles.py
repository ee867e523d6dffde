"""Built-in network profiles.

Each profile is produced by a function so callers receive fresh values at startup
instead of sharing module level tables.
"""
from collections import namedtuple
from typing import Tuple

from chaingenesis.genesis.profile import ConsensusParams, Forks, NetworkProfile

BuiltinProfile = namedtuple("BuiltinProfile", ["label", "filename", "profile"])

ALL_FORKS_AT_GENESIS = Forks(
    runtime_upgrade_block=0, deploy_origin_block=0, deployment_hook_fix_block=0
)


def localnet() -> NetworkProfile:
    return NetworkProfile.create(
        name="localnet",
        chain_id=1337,
        # who is able to deploy smart contract from genesis block
        deployers=["0x00a601f45688dba8a070722073b015277cf36725"],
        validators=["0x00a601f45688dba8a070722073b015277cf36725"],
        system_treasury={"0x00a601f45688dba8a070722073b015277cf36725": 10000},
        consensus_params=ConsensusParams(
            # suggested values are 3k+1: 7, 13, 19, 25, 31...
            active_validators_length=25,
            epoch_block_interval=40,
            # missed blocks per epoch before losing rewards
            misdemeanor_threshold=5,
            # missed blocks per epoch before going to jail
            felony_threshold=10,
            validator_jail_epoch_length=3,
            undelegate_period=2,
            min_validator_stake_amount=0xDE0B6B3A7640000,  # 1 ether
            min_staking_amount=0x1BC16D674EC800002,
        ),
        initial_stakes={
            "0x00a601f45688dba8a070722073b015277cf36725": "0x3635c9adc5dea00000",  # 1000 eth
        },
        voting_period=20,  # 1 minute
        faucet={
            "0x00a601f45688dba8a070722073b015277cf36725": "0x21e19e0c9bab2400000",
            "0x57BA24bE2cF17400f37dB3566e839bfA6A2d018a": "0x21e19e0c9bab2400000",
            "0xEbCf9D06cf9333706E61213F17A795B2F7c55F1b": "0x21e19e0c9bab2400000",
        },
    )


def devnet() -> NetworkProfile:
    validators = [
        "0x08fae3885e299c24ff9841478eb946f41023ac69",
        "0x751aaca849b09a3e347bbfe125cf18423cc24b40",
        "0xa6ff33e3250cc765052ac9d7f7dfebda183c4b9b",
        "0x49c0f7c8c11a4c80dc6449efe1010bb166818da8",
        "0x8e1ea6eaa09c3b40f4a51fcd056a031870a0549a",
    ]
    return NetworkProfile.create(
        name="devnet",
        chain_id=17243,
        deployers=[],
        validators=validators,
        system_treasury={"0x0000000000000000000000000000000000000000": 10000},
        consensus_params=ConsensusParams(
            active_validators_length=25,
            epoch_block_interval=1200,
            misdemeanor_threshold=50,
            felony_threshold=150,
            validator_jail_epoch_length=7,
            undelegate_period=6,
            min_validator_stake_amount=0xDE0B6B3A7640000,
            min_staking_amount=0xDE0B6B3A7640000,
        ),
        initial_stakes={v: "0x3635c9adc5dea00000" for v in validators},  # 1000 eth
        voting_period=60,  # 3 minutes
        faucet={
            "0x00a601f45688dba8a070722073b015277cf36725": "0x21e19e0c9bab2400000",  # governance
            "0xb891fe7b38f857f53a7b5529204c58d5c487280b": "0x52b7d2dcc80cd2e4000000",  # faucet
        },
    )


def testnet() -> NetworkProfile:
    return NetworkProfile.create(
        name="testnet",
        chain_id=3332199,
        deployers=[
            "0xEf2AEf8927B2c2c4d9278F97b8c9dae0252dbeD6",
            "0x7f91AB4e20cb5da54A7965F177Dab59624668027",
            "0xA1765cE354E5F3515fB0BBb912ECaC3F04821f57",
        ],
        validators=[
            "0xc2aCe5085D05732E80e41dFECF26AE0B60E60F04",
            "0x73E46Db39D00a37efEf86621C6a5c33591A00ef5",
            "0xe0579984bD4b3a1F8E1652C84411415A5887d310",
            "0xC72FD6515FeE82e737b34eb8BA9DB4C4A35D47Ac",
            "0x17EBd907EFFD60C83a3450689e1936AfeFaC38Da",
        ],
        system_treasury={"0x9C9459Aaf90df6347D4585726F0e97802788f830": 10000},
        consensus_params=ConsensusParams(
            active_validators_length=13,
            epoch_block_interval=1200,  # ~1 hour
            misdemeanor_threshold=100,
            felony_threshold=200,
            validator_jail_epoch_length=6,
            undelegate_period=1,
            min_validator_stake_amount=0x3635C9ADC5DEA00000,
            min_staking_amount=0xDE0B6B3A7640000,
        ),
        initial_stakes={
            "0xc2aCe5085D05732E80e41dFECF26AE0B60E60F04": "0x152D02C7E14AF6800000",  # 100 000 eth
            "0x73E46Db39D00a37efEf86621C6a5c33591A00ef5": "0x3635C9ADC5DEA00000",
            "0xe0579984bD4b3a1F8E1652C84411415A5887d310": "0x3635C9ADC5DEA00000",
            "0xC72FD6515FeE82e737b34eb8BA9DB4C4A35D47Ac": "0x3635C9ADC5DEA00000",
            "0x17EBd907EFFD60C83a3450689e1936AfeFaC38Da": "0x2B5E3AF16B1880000",  # 50 eth
        },
        voting_period=1200,
        faucet={
            "0xFc26e7Fe0FeF90e6D9F096EC0847259373402671": "0x197D7361310E45C669F80000",
        },
        forks=ALL_FORKS_AT_GENESIS,
    )


def spicy() -> NetworkProfile:
    return NetworkProfile.create(
        name="spicy",
        chain_id=88882,
        deployers=["0x02880217b082cC24D371eB5Bad0827D208bcBC6D"],
        validators=[
            "0xb1b5a8b8E2a263C0F497BC32a7cb6D27AEA921fc",
            "0x4dD74707f22b74EC872CA6AEB2a065E3d006B9d9",
            "0xBD6D190548bbF5C6920a826dF063A970Bd18f307",
            "0xeC2e502f77c4811f2ef477397235976b1371FCd3",
            "0x1cB3FC9e10fB5b845e53e5EaAE0bD561e662b0A5",
            "0xbdBF08393b66130B4b243863150A265b2A5Df642",
            "0x86f2BB174c450917A1b560c66525E64A1c9B6a04",
        ],
        system_treasury={"0x060eA461Cf7E78A38400dE9255687beb9b2c7298": 10000},
        consensus_params=ConsensusParams(
            active_validators_length=5,
            epoch_block_interval=7200,  # ~6 hours
            misdemeanor_threshold=400,
            felony_threshold=800,
            validator_jail_epoch_length=4,
            undelegate_period=1,
            min_validator_stake_amount=0x3635C9ADC5DEA00000,
            min_staking_amount=0xDE0B6B3A7640000,
        ),
        initial_stakes={
            "0xb1b5a8b8E2a263C0F497BC32a7cb6D27AEA921fc": "0x152D02C7E14AF6800000",
            "0x4dD74707f22b74EC872CA6AEB2a065E3d006B9d9": "0x3635C9ADC5DEA00000",
            "0xBD6D190548bbF5C6920a826dF063A970Bd18f307": "0x3635C9ADC5DEA00000",
            "0xeC2e502f77c4811f2ef477397235976b1371FCd3": "0x3635C9ADC5DEA00000",
            "0x1cB3FC9e10fB5b845e53e5EaAE0bD561e662b0A5": "0x3635C9ADC5DEA00000",
            "0xbdBF08393b66130B4b243863150A265b2A5Df642": "0x3635C9ADC5DEA00000",
            "0x86f2BB174c450917A1b560c66525E64A1c9B6a04": "0x3635C9ADC5DEA00000",
        },
        voting_period=1200,
        faucet={
            "0x77c6DC8fC511Bf2Fa594c47DdC336C69D745e73A": "0x197D7361310E45C669F80000",  # main
            "0xa6779032c48127f362244AADD80E3A6E1b50BA93": "0x33B2E3C9FD0803CE8000000",  # faucet
        },
        forks=ALL_FORKS_AT_GENESIS,
    )


def mainnet() -> NetworkProfile:
    validators = [
        "0xAc3448af2B124d70F5A93aDa08B3EE69c5C9eA0B",
        "0x4fC485Fc2668170033abE0c421F74a5d8CFF4281",
        "0x544EB49544319ee63BC3c7115e45Bf1B3e23c2c2",
        "0x053b4d178AdFA5b8C06d55A7765D6d1486d5c6a0",
        "0xaF3aD38D80E5D4668ddF8CA170Cb941ff5f02244",
    ]
    return NetworkProfile.create(
        name="mainnet",
        chain_id=32199,
        deployers=["0xAc3448af2B124d70F5A93aDa08B3EE69c5C9eA0B"],
        validators=validators,
        # shares are basis points: 0.3% => 30, 3% => 300, 100% => 10000
        system_treasury={"0xFddAc11E0072e3377775345D58de0dc88A964837": 10000},
        consensus_params=ConsensusParams(
            active_validators_length=5,
            epoch_block_interval=300,
            misdemeanor_threshold=14400,
            felony_threshold=21600,
            validator_jail_epoch_length=7,
            undelegate_period=7,
            min_validator_stake_amount=0x84595161401484A000000,  # 10,000,000
            min_staking_amount=0x56BC75E2D63100000,  # 100
        ),
        voting_period=271600,  # 7 days
        initial_stakes={v: "0x84595161401484A000000" for v in validators},
        faucet={
            "0xFddAc11E0072e3377775345D58de0dc88A964837": "0x1C3CA1E1AAC1A93AF8800000",  # treasury
            "0xAc3448af2B124d70F5A93aDa08B3EE69c5C9eA0B": "0x56BC75E2D63100000",
            "0x4fC485Fc2668170033abE0c421F74a5d8CFF4281": "0x56BC75E2D63100000",
            "0x544EB49544319ee63BC3c7115e45Bf1B3e23c2c2": "0x56BC75E2D63100000",
            "0x053b4d178AdFA5b8C06d55A7765D6d1486d5c6a0": "0x56BC75E2D63100000",
            "0xaF3aD38D80E5D4668ddF8CA170Cb941ff5f02244": "0x56BC75E2D63100000",
            "0x252B5CA6c838ae47508c1eA72Dd73b58c607Af0f": "0x3635C9ADC5DEA00000",  # bridge relayer
        },
        forks=ALL_FORKS_AT_GENESIS,
    )


def builtin_profiles() -> Tuple[BuiltinProfile, ...]:
    """
    The profiles regenerated when no profile file is given, in build order
    :return:
    """
    return (
        BuiltinProfile("localnet", "localnet.json", localnet()),
        BuiltinProfile("devnet", "devnet.json", devnet()),
        BuiltinProfile("scoville testnet", "testnet.json", testnet()),
        BuiltinProfile("spicy testnet", "spicy.json", spicy()),
        BuiltinProfile("mainnet", "mainnet.json", mainnet()),
    )
